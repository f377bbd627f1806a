"""One-page PDF profile report for a student record."""

from __future__ import annotations

import io
import textwrap
from datetime import datetime
from typing import List, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from .models import Student
from .schemas import format_timestamp

LABEL_X = 60
VALUE_X = 210
LINE_HEIGHT = 18
SUMMARY_WRAP = 90


def _display(value) -> str:
    if value is None or value == "":
        return "-"
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def report_rows(student: Student) -> List[Tuple[str, str]]:
    """Label/value pairs printed on the report, in order. The password never appears."""
    return [
        ("Full Name", _display(student.fullname)),
        ("Student Number", _display(student.student_no)),
        ("ID Number", _display(student.id_number)),
        ("Date of Birth", _display(student.date_of_birth)),
        ("Email", _display(student.email)),
        ("Course", _display(student.course)),
        ("Enrollment Date", _display(student.enrollment_date)),
        ("Registered", _display(format_timestamp(student.registration_timestamp))),
        ("Status", _display(student.status)),
    ]


def render_student_report(student: Student, institution: str, generated_at: Optional[datetime] = None) -> bytes:
    generated_at = generated_at or datetime.now()
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    pdf.setTitle(f"Student Profile - {student.student_no}")

    pdf.setFont("Helvetica", 9)
    pdf.drawString(LABEL_X, height - 40, generated_at.strftime("Generated %Y-%m-%d %H:%M:%S"))
    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawCentredString(width / 2, height - 70, institution)
    pdf.setFont("Helvetica-Bold", 20)
    pdf.drawCentredString(width / 2, height - 100, "Student Profile Report")
    pdf.line(LABEL_X, height - 112, width - LABEL_X, height - 112)

    y = height - 140
    for label, value in report_rows(student):
        pdf.setFont("Helvetica-Bold", 11)
        pdf.drawString(LABEL_X, y, f"{label}:")
        pdf.setFont("Helvetica", 11)
        pdf.drawString(VALUE_X, y, value)
        y -= LINE_HEIGHT

    y -= LINE_HEIGHT / 2
    pdf.setFont("Helvetica-Bold", 11)
    pdf.drawString(LABEL_X, y, "Course Summary:")
    y -= LINE_HEIGHT
    pdf.setFont("Helvetica", 10)
    for line in textwrap.wrap(student.course_summary or "-", SUMMARY_WRAP):
        pdf.drawString(LABEL_X, y, line)
        y -= LINE_HEIGHT - 4

    pdf.setFont("Helvetica-Oblique", 8)
    pdf.drawCentredString(width / 2, 30, f"{institution} - confidential student record")
    pdf.showPage()
    pdf.save()
    buffer.seek(0)
    return buffer.getvalue()


def report_filename(student: Student) -> str:
    return f"{student.student_no}_profile_report.pdf"
