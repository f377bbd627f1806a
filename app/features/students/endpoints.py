from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.common.deps import CurrentUser, ensure_self_or_admin, require_admin, require_role, require_student
from app.common.schemas import ERROR_RESPONSES, StatusResponse
from app.core.config import get_settings
from app.db.session import get_db
from app.features.students import service
from app.features.students.derivation import COURSE_SUMMARIES, course_summary, derive_date_of_birth
from app.features.students.models import StudentStatus
from app.features.students.report import render_student_report, report_filename
from app.features.students.schemas import (
    Catalog,
    CourseInfo,
    DerivedFields,
    StudentCreate,
    StudentOut,
    StudentUpdate,
    StudentWriteResponse,
)

router = APIRouter(prefix="/api/students", tags=["students"], responses=ERROR_RESPONSES)
profile_router = APIRouter(prefix="/api/profile", tags=["profile"], responses=ERROR_RESPONSES)
reference_router = APIRouter(prefix="/api", tags=["reference"])


def _pdf_response(student) -> Response:
    pdf = render_student_report(student, get_settings().institution_name)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(student)}"'},
    )


# -------------------
# Admin CRUD
# -------------------
@router.get("", response_model=List[StudentOut])
def list_students(
    q: Optional[str] = Query(default=None, description="Search fullname, studentNo or email"),
    current: CurrentUser = Depends(require_admin()),
    db: Session = Depends(get_db),
) -> List[StudentOut]:
    return [StudentOut.model_validate(s) for s in service.list_students(db, q)]


@router.post("", response_model=StudentWriteResponse)
def create_student(
    payload: StudentCreate,
    current: CurrentUser = Depends(require_admin()),
    db: Session = Depends(get_db),
) -> StudentWriteResponse:
    student = service.create_student(db, payload)
    return StudentWriteResponse(
        message="Student registered successfully",
        student=StudentOut.model_validate(student),
    )


@router.get("/{student_no}", response_model=StudentOut)
def read_student(
    student_no: str,
    current: CurrentUser = Depends(require_role("student")),
    db: Session = Depends(get_db),
) -> StudentOut:
    ensure_self_or_admin(current, student_no)
    return StudentOut.model_validate(service.get_student(db, student_no))


@router.put("/{student_no}", response_model=StudentWriteResponse)
def update_student(
    student_no: str,
    payload: StudentUpdate,
    current: CurrentUser = Depends(require_admin()),
    db: Session = Depends(get_db),
) -> StudentWriteResponse:
    student = service.update_student(db, student_no, payload)
    return StudentWriteResponse(
        message="Successfully updated student details",
        student=StudentOut.model_validate(student),
    )


@router.delete("/{student_no}", response_model=StatusResponse)
def delete_student(
    student_no: str,
    current: CurrentUser = Depends(require_admin()),
    db: Session = Depends(get_db),
) -> StatusResponse:
    service.delete_student(db, student_no)
    return StatusResponse(success=True, message="Successfully deleted student")


@router.get("/{student_no}/report", response_class=Response)
def student_report(
    student_no: str,
    current: CurrentUser = Depends(require_role("student")),
    db: Session = Depends(get_db),
) -> Response:
    ensure_self_or_admin(current, student_no)
    return _pdf_response(service.get_student(db, student_no))


# -------------------
# Student self-service
# -------------------
@profile_router.get("", response_model=StudentOut)
def my_profile(current: CurrentUser = Depends(require_student()), db: Session = Depends(get_db)) -> StudentOut:
    return StudentOut.model_validate(service.get_student(db, current.student_no))


@profile_router.get("/report", response_class=Response)
def my_report(current: CurrentUser = Depends(require_student()), db: Session = Depends(get_db)) -> Response:
    return _pdf_response(service.get_student(db, current.student_no))


# -------------------
# Form helpers
# -------------------
@reference_router.get("/derived-fields", response_model=DerivedFields)
def derived_fields(
    id_number: Optional[str] = Query(default=None, alias="idNumber"),
    course: Optional[str] = Query(default=None),
) -> DerivedFields:
    """Date of birth encoded in an ID number and the summary of a course."""
    return DerivedFields(
        date_of_birth=derive_date_of_birth(id_number),
        course_summary=course_summary(course),
    )


@reference_router.get("/catalog", response_model=Catalog)
def catalog() -> Catalog:
    return Catalog(
        courses=[CourseInfo(name=c.value, summary=text) for c, text in COURSE_SUMMARIES.items()],
        statuses=[s.value for s in StudentStatus],
    )
