from typing import List

import numpy as np
import pandas as pd

from .backend_logic import grade_point, update_course
from .config import PASS_GRADE
from .validation import OPTIONAL_TEXT_FIELDS, Course, make_manual_course

# ------------------------
# CSV helpers (UI-side)
# ------------------------

COURSE_COLUMNS = ["course_title", "credits", "grade"]

# accepted spellings -> canonical column
_COLUMN_ALIASES = {
    "title": "course_title",
    "course": "course_title",
    "credit": "credits",
    "semester": "exam_month",
}


def _normalise_cols(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
    renames = {
        alias: canonical
        for alias, canonical in _COLUMN_ALIASES.items()
        if alias in df.columns and canonical not in df.columns
    }
    return df.rename(columns=renames)


def read_csv_upload(uploaded_file) -> pd.DataFrame:
    # keep grades and codes as text ("F" must not become NaN-ish, "007" stays "007")
    df = pd.read_csv(uploaded_file, dtype=str, keep_default_na=False)
    return _normalise_cols(df)


def validate_courses_csv(df: pd.DataFrame) -> pd.DataFrame:
    df = _normalise_cols(df)
    missing = set(COURSE_COLUMNS) - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns: {sorted(missing)}. Expected: Course Title, Credits, Grade.")
    keep = COURSE_COLUMNS + [c for c in ("course_code", "exam_month") if c in df.columns]
    return df[keep].copy()


def _plain(value):
    """numpy scalar -> Python scalar, missing -> None."""
    if isinstance(value, np.generic):
        value = value.item()
    if pd.isna(value):
        return None
    return value


def parse_courses(df: pd.DataFrame) -> List[Course]:
    """
    Turn an edited or uploaded table into courses. Rows without a title are
    treated as blank and skipped; any other bad row raises ValueError naming
    the row, so the user can fix it.
    """
    courses = []
    for row_no, (_, row) in enumerate(df.iterrows(), start=1):
        record = {k: _plain(v) for k, v in row.items()}
        record = {k: v for k, v in record.items() if v is not None}
        if not str(record.get("course_title", "")).strip():
            continue
        grade = record.get("grade")
        if isinstance(grade, str):
            grade = grade.strip().upper()
        optional = {k: v for k, v in record.items() if k in OPTIONAL_TEXT_FIELDS}
        try:
            course = make_manual_course(
                courses, record["course_title"], record.get("credits"), grade, **optional
            )
        except ValueError as e:
            raise ValueError(f"Row {row_no}: {e}") from e
        courses.append(course)
    return courses


# ------------------------
# Report tables
# ------------------------
def courses_to_frame(courses: List[Course]) -> pd.DataFrame:
    df = pd.DataFrame(
        [c.to_dict() for c in courses],
        columns=["id", "course_code", "course_title", "course_type", "credits",
                 "grade", "exam_month", "course_distribution"],
    )
    df["points"] = [None if c.grade == PASS_GRADE else grade_point(c.grade) for c in courses]
    return df


def apply_frame_edits(courses: List[Course], edited: pd.DataFrame) -> List[Course]:
    """
    Fold grade/credit changes made in a report table back into the course
    list. Rows are matched by id; other columns are ignored.
    """
    by_id = {c.id: c for c in courses}
    updated = list(courses)
    for _, row in edited.iterrows():
        course = by_id.get(_plain(row["id"]))
        if course is None:
            continue
        grade = _plain(row["grade"])
        credits = _plain(row["credits"])
        if grade == course.grade:
            grade = None
        if credits is not None and float(credits) == course.credits:
            credits = None
        if grade is not None or credits is not None:
            updated = update_course(updated, course.id, grade=grade, credits=credits)
    return updated
