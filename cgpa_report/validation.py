"""
Course records and the rules that decide which raw records become one.

normalize() is deliberately lenient: a record that fails a check is skipped
and the rest of the batch carries on. An empty result is the caller's
problem (see require_courses).
"""

import math
import re
from dataclasses import asdict, dataclass, field
from typing import Iterable, List, Mapping, Optional

from .app_logger import get_logger
from .config import GRADE_POINTS
from .errors import NoValidCoursesError

log = get_logger("validation")

_DECIMAL_RE = re.compile(r"[+-]?\d+(\.\d+)?$")
_INTEGER_RE = re.compile(r"[+-]?\d+$")

OPTIONAL_TEXT_FIELDS = ("course_code", "course_type", "exam_month", "course_distribution")


@dataclass(frozen=True)
class Course:
    """
    One course from the student's grade sheet.

    Attributes:
        id: Identifier, synthesized when the payload has none
        course_title: Trimmed, never empty
        credits: Non-negative credit value
        grade: One of S, A, B, C, D, E, F, P
        course_code: e.g. "CSE1012" (empty for legacy payloads)
        course_type: e.g. "ETL"
        exam_month: Semester label, e.g. "Jan-2024"
        course_distribution: e.g. "UE"
    """
    id: int
    course_title: str
    credits: float
    grade: str
    course_code: str = ""
    course_type: str = ""
    exam_month: str = ""
    course_distribution: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class StudentSummary:
    """Student-level fields that may wrap the course list."""
    id: Optional[int] = None
    credits_registered: Optional[float] = None
    credits_earned: Optional[float] = None
    cgpa: Optional[float] = None
    courses: List[Course] = field(default_factory=list)


# ------------------------
# Coercion helpers
# ------------------------
def coerce_number(value) -> Optional[float]:
    """Numbers and plain decimal strings become floats; anything else is None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and _DECIMAL_RE.match(value.strip()):
        number = float(value.strip())
    else:
        return None
    return number if math.isfinite(number) else None


def coerce_id(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER_RE.match(value.strip()):
        return int(value.strip())
    return None


def _text(value) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# ------------------------
# Validation
# ------------------------
def _check(raw) -> Optional[str]:
    """Return the reason a raw record is unusable, or None if it is fine."""
    if not isinstance(raw, Mapping):
        return "not an object"
    title = raw.get("course_title")
    if not isinstance(title, str) or not title.strip():
        return "missing course_title"
    credits = coerce_number(raw.get("credits"))
    if credits is None or credits < 0:
        return "bad credits"
    grade = raw.get("grade")
    if not isinstance(grade, str) or grade not in GRADE_POINTS:
        return "unknown grade"
    return None


def normalize(raw_records: Iterable) -> List[Course]:
    raw_records = list(raw_records)

    explicit_ids = [coerce_id(r.get("id")) for r in raw_records if isinstance(r, Mapping)]
    next_id = max([i for i in explicit_ids if i is not None], default=0) + 1

    courses = []
    dropped = 0
    for raw in raw_records:
        reason = _check(raw)
        if reason is not None:
            dropped += 1
            log.debug("dropping record: %s", reason)
            continue

        course_id = coerce_id(raw.get("id"))
        if course_id is None:
            course_id = next_id
            next_id += 1

        optional = {name: _text(raw.get(name)).strip() for name in OPTIONAL_TEXT_FIELDS}
        courses.append(
            Course(
                id=course_id,
                course_title=raw["course_title"].strip(),
                credits=coerce_number(raw["credits"]),
                grade=raw["grade"],
                **optional,
            )
        )

    if dropped:
        log.info("kept %d of %d course records", len(courses), len(raw_records))
    return courses


def require_courses(raw_records: Iterable) -> List[Course]:
    courses = normalize(raw_records)
    if not courses:
        raise NoValidCoursesError("no record passed course validation")
    return courses


def coerce_student_summary(envelope: Mapping, courses: List[Course]) -> StudentSummary:
    return StudentSummary(
        id=coerce_id(envelope.get("id")),
        credits_registered=coerce_number(envelope.get("credits_registered")),
        credits_earned=coerce_number(envelope.get("credits_earned")),
        cgpa=coerce_number(envelope.get("cgpa")),
        courses=list(courses),
    )


# ------------------------
# Manual entry
# ------------------------
def make_manual_course(courses: List[Course], title: str, credits, grade: str, **optional) -> Course:
    """
    Build a course typed in by hand. Unlike normalize(), this raises
    ValueError with a message meant for the user.

    Extra keyword arguments fill the optional text fields (course_code,
    exam_month, ...).
    """
    title = _text(title).strip()
    if not title:
        raise ValueError("Please enter a course title")

    value = coerce_number(credits)
    if value is None or value <= 0:
        raise ValueError("Please enter valid credits (greater than 0)")

    if not grade:
        raise ValueError("Please select a grade")
    if grade not in GRADE_POINTS:
        raise ValueError(f"Unknown grade: {grade}")

    next_id = max((c.id for c in courses), default=0) + 1
    extra = {name: _text(optional.get(name)).strip() for name in OPTIONAL_TEXT_FIELDS}
    return Course(id=next_id, course_title=title, credits=value, grade=grade, **extra)
