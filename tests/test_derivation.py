from datetime import date

import pytest

from app.features.students.derivation import (
    COURSE_SUMMARIES,
    course_summary,
    derive_date_of_birth,
    is_well_formed_id_number,
    resolve_course_summary,
)
from app.features.students.models import Course

TODAY = date(2026, 10, 19)


@pytest.mark.parametrize(
    "id_number,expected",
    [
        ("9901015800084", date(1999, 1, 1)),
        ("0502295800081", None),  # 2005-02-29 does not exist
        ("0402295800081", date(2004, 2, 29)),
        ("2612315800080", date(2026, 12, 31)),  # same two-digit year stays in the 2000s
        ("2701015800080", date(1927, 1, 1)),
    ],
)
def test_derive_date_of_birth(id_number, expected):
    assert derive_date_of_birth(id_number, today=TODAY) == expected


@pytest.mark.parametrize("bad", [None, "", "123", "99010158000845", "99010158000a4", "９９０１０１５８０００８４"])
def test_malformed_id_numbers_derive_nothing(bad):
    assert not is_well_formed_id_number(bad)
    assert derive_date_of_birth(bad, today=TODAY) is None


def test_month_out_of_range_is_not_a_date():
    assert derive_date_of_birth("9913015800084", today=TODAY) is None


def test_every_course_has_a_summary():
    assert set(COURSE_SUMMARIES) == set(Course)
    assert course_summary("Networking").startswith("This course covers the foundation of networking")
    assert course_summary(Course.it_security) == COURSE_SUMMARIES[Course.it_security]


def test_unknown_course_summary_is_empty():
    assert course_summary("Basket Weaving") == ""
    assert course_summary(None) == ""


def test_resolve_course_summary_fills_blank():
    assert resolve_course_summary(Course.networking, None) == COURSE_SUMMARIES[Course.networking]
    assert resolve_course_summary(Course.networking, "   ") == COURSE_SUMMARIES[Course.networking]


def test_resolve_course_summary_replaces_stale_fixed_text():
    stale = COURSE_SUMMARIES[Course.it_security]
    assert resolve_course_summary(Course.networking, stale) == COURSE_SUMMARIES[Course.networking]


def test_resolve_course_summary_keeps_manual_text():
    assert resolve_course_summary(Course.networking, "Evening class, part-time") == "Evening class, part-time"


def test_resolve_course_summary_without_course():
    assert resolve_course_summary(None, "") is None
    assert resolve_course_summary(None, "Notes") == "Notes"
