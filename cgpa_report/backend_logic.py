from collections import Counter
from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .config import DISPLAY_DECIMALS, GRADE_ORDER, GRADE_POINTS, MONTH_INDEX, PASS_GRADE
from .errors import FormatError
from .validation import Course, coerce_number

# ------------------------
# Core logic
# ------------------------
def round_2dp_half_up(x: float) -> float:
    quantum = Decimal(1).scaleb(-DISPLAY_DECIMALS)
    return float(Decimal(str(x)).quantize(quantum, rounding=ROUND_HALF_UP))


def grade_point(grade: str) -> int:
    return GRADE_POINTS.get(grade, 0)


def graded_courses(courses: Sequence[Course]) -> List[Course]:
    """Courses that count towards an average, i.e. everything except Pass."""
    return [c for c in courses if c.grade != PASS_GRADE]


def weighted_average(courses: Sequence[Course]) -> float:
    """
    Credit-weighted grade point average.
    P grades are left out; no graded courses (or no graded credits) gives 0.
    """
    counted = graded_courses(courses)
    if not counted:
        return 0.0

    gc = np.array([(grade_point(c.grade), c.credits) for c in counted], dtype=float)
    points = gc[:, 0]
    credits = gc[:, 1]
    total_credits = float(credits.sum())
    if total_credits == 0:
        return 0.0

    return float(np.dot(points, credits) / total_credits)


def cgpa(courses: Sequence[Course]) -> float:
    return weighted_average(courses)


# ------------------------
# Semesters
# ------------------------
@dataclass(frozen=True)
class SemesterGroup:
    label: str
    courses: Tuple[Course, ...]
    gpa: float


def parse_exam_month(label: str) -> Tuple[int, int]:
    """
    "Jan-2024" -> (2024, 0). The tuple compares in calendar order.
    """
    month, sep, year = (label or "").strip().partition("-")
    if not sep:
        raise FormatError(f"Semester label {label!r} is not of the form Mon-Year")

    month_idx = MONTH_INDEX.get(month.strip().title())
    if month_idx is None:
        raise FormatError(f"Unknown month in semester label {label!r}")

    try:
        year_num = int(year.strip())
    except ValueError:
        raise FormatError(f"Bad year in semester label {label!r}") from None

    return year_num, month_idx


def group_by_semester(courses: Sequence[Course]) -> List[SemesterGroup]:
    groups: Dict[str, List[Course]] = {}
    for c in courses:
        groups.setdefault(c.exam_month, []).append(c)

    labels = sorted(groups, key=parse_exam_month)
    return [
        SemesterGroup(label=label, courses=tuple(groups[label]), gpa=weighted_average(groups[label]))
        for label in labels
    ]


def mean_semester_gpa(groups: Sequence[SemesterGroup]) -> float:
    """
    Plain mean of the semester GPAs. This is NOT the CGPA: a light semester
    weighs as much as a heavy one here.
    """
    if not groups:
        return 0.0
    return float(np.mean([g.gpa for g in groups]))


# ------------------------
# Statistics
# ------------------------
def grade_distribution(courses: Sequence[Course]) -> Dict[str, int]:
    counts = Counter(c.grade for c in courses)
    return {g: counts[g] for g in GRADE_ORDER if counts[g]}


def credit_totals(courses: Sequence[Course]) -> Dict[str, float]:
    counted = graded_courses(courses)
    return {
        "total_credits": float(sum(c.credits for c in courses)),
        "graded_credits": float(sum(c.credits for c in counted)),
        "graded_course_count": len(counted),
    }


# ------------------------
# Interactive edits
# ------------------------
def update_course(
    courses: Sequence[Course],
    course_id: int,
    *,
    grade: Optional[str] = None,
    credits=None,
) -> List[Course]:
    """
    Return a new course list with one course changed. The input list and
    its courses are left as they are.
    """
    changes = {}
    if grade is not None:
        if grade not in GRADE_POINTS:
            raise ValueError(f"Unknown grade: {grade}")
        changes["grade"] = grade
    if credits is not None:
        value = coerce_number(credits)
        if value is None or value < 0:
            raise ValueError(f"Credits must be a number >= 0 (got {credits!r})")
        changes["credits"] = value

    if not any(c.id == course_id for c in courses):
        raise KeyError(course_id)

    return [replace(c, **changes) if c.id == course_id else c for c in courses]


def report_summary(courses: Sequence[Course]) -> dict:
    """
    Everything the report shows, computed in one go.

    Semesters are only grouped when every course carries an exam_month;
    legacy payloads without one get an overall figure only.
    """
    has_semesters = bool(courses) and all(c.exam_month for c in courses)
    semesters = group_by_semester(courses) if has_semesters else []

    overall = cgpa(courses)
    avg_gpa = mean_semester_gpa(semesters)

    summary = {
        "cgpa": overall,
        "cgpa_rounded": round_2dp_half_up(overall),
        "avg_gpa": avg_gpa,
        "avg_gpa_rounded": round_2dp_half_up(avg_gpa),
        "course_count": len(courses),
        "semesters": semesters,
        "distribution": grade_distribution(courses),
    }
    summary.update(credit_totals(courses))
    return summary
