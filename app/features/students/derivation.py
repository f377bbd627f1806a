"""Values derived from other student fields.

``derive_date_of_birth`` reads the birth date encoded in the first six digits
of a 13-digit national ID number (YYMMDD). The century is resolved against
today's two-digit year: a larger YY belongs to the 1900s, anything else to
the 2000s.

``course_summary`` maps each fixed course to its descriptive text.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Dict, Optional, Union

from .models import Course

ID_NUMBER_PATTERN = re.compile(r"^\d{13}$", re.ASCII)

COURSE_SUMMARIES: Dict[Course, str] = {
    Course.system_development: (
        "The process of designing, creating, testing, and implementing new software or customized "
        "systems to solve problems or meet user needs. It involves methodical phases, known as the "
        "System Development Life Cycle (SDLC), and can cover everything from internal custom software "
        "to integrating third-party applications. The goal is to produce high-quality, accurate systems "
        "that meet client requirements, often involving a collaborative team of specialists."
    ),
    Course.it_security: (
        "Focuses on the practice of protecting computer networks, systems, and data from unauthorized "
        "access, attacks, and damage. It involves using a combination of technologies, policies, and "
        "physical security measures to ensure the confidentiality, integrity, and availability of "
        "information assets. Key areas include network security, endpoint security, and application "
        "security, and its importance is growing due to the exponential increase in cyberattacks."
    ),
    Course.networking: (
        "This course covers the foundation of networking and network devices, media, and protocols. "
        "Explores network configuration, maintenance, and security in enterprise and cloud environments."
    ),
    Course.ai_data_science: (
        "Introduces artificial intelligence, data analysis, and machine learning concepts for smart "
        "systems. This course is designed to equip individuals with the skills needed for careers such "
        "as data scientist, AI engineer, or data analyst, and often include hands-on projects, "
        "real-world case studies, and a strong theoretical foundation."
    ),
    Course.full_stack_dev: (
        "You'll learn to build complete web applications using HTML, CSS, JavaScript, React, "
        "TypeScript, Node.js, Python, and more."
    ),
}


def is_well_formed_id_number(id_number: Optional[str]) -> bool:
    return bool(id_number) and ID_NUMBER_PATTERN.match(id_number.strip()) is not None


def derive_date_of_birth(id_number: Optional[str], today: Optional[date] = None) -> Optional[date]:
    """Return the birth date encoded in ``id_number`` or None when it has none."""
    if not is_well_formed_id_number(id_number):
        return None
    digits = id_number.strip()
    yy, mm, dd = int(digits[0:2]), int(digits[2:4]), int(digits[4:6])
    current_yy = (today or date.today()).year % 100
    century = 1900 if yy > current_yy else 2000
    try:
        return date(century + yy, mm, dd)
    except ValueError:
        return None


def _as_course(course: Union[Course, str, None]) -> Optional[Course]:
    if course is None or isinstance(course, Course):
        return course
    try:
        return Course(course.strip())
    except ValueError:
        return None


def course_summary(course: Union[Course, str, None]) -> str:
    """Fixed summary for ``course``; unknown or blank courses give ``""``."""
    resolved = _as_course(course)
    return COURSE_SUMMARIES[resolved] if resolved else ""


def resolve_course_summary(course: Union[Course, str, None], submitted: Optional[str]) -> Optional[str]:
    """Summary to store for ``course`` given what the caller submitted.

    A manual summary is kept. A blank one, or one that is the fixed text of a
    different course, is replaced by the course's own text.
    """
    text = (submitted or "").strip()
    auto = course_summary(course)
    if not text or (text in COURSE_SUMMARIES.values() and text != auto):
        return auto or None
    return text
