# tests/test_io_csv.py
from __future__ import annotations

import io
import re

import numpy as np
import pandas as pd
import pytest

from cgpa_report.backend_logic import cgpa
from cgpa_report.io_csv import (
    apply_frame_edits,
    courses_to_frame,
    parse_courses,
    read_csv_upload,
    validate_courses_csv,
)


def test_read_csv_normalises_headers():
    upload = io.StringIO("Title,Credit,Grade,Semester\nModern Physics,4.0,S,Jan-2024\n")
    df = read_csv_upload(upload)
    assert list(df.columns) == ["course_title", "credits", "grade", "exam_month"]
    assert df.loc[0, "credits"] == "4.0"


def test_validate_courses_csv_keeps_known_columns():
    df = pd.DataFrame([{"Course Title": "X", "Credits": 3, "Grade": "A", "Notes": "ignored"}])
    out = validate_courses_csv(df)
    assert list(out.columns) == ["course_title", "credits", "grade"]


def test_validate_courses_csv_reports_missing_columns():
    with pytest.raises(ValueError, match="Missing columns"):
        validate_courses_csv(pd.DataFrame([{"course_title": "X", "credits": 3}]))


def test_parse_courses_from_upload():
    upload = io.StringIO(
        "course_title,credits,grade,exam_month\n"
        "Modern Physics,4,s,Jan-2024\n"
        ",,,\n"
        "Yoga,1,P,Jul-2024\n"
    )
    courses = parse_courses(validate_courses_csv(read_csv_upload(upload)))
    assert [(c.course_title, c.credits, c.grade) for c in courses] == [
        ("Modern Physics", 4.0, "S"),
        ("Yoga", 1.0, "P"),
    ]
    assert [c.id for c in courses] == [1, 2]
    assert [c.exam_month for c in courses] == ["Jan-2024", "Jul-2024"]


@pytest.mark.parametrize(
    "row, message",
    [
        ("Mystery,3,Q", "Row 2: Unknown grade: Q"),
        ("Seminar,0,A", "Row 2: Please enter valid credits (greater than 0)"),
        ("Seminar,,A", "Row 2: Please enter valid credits (greater than 0)"),
        ("Seminar,3,", "Row 2: Please select a grade"),
    ],
)
def test_parse_courses_reports_the_bad_row(row, message):
    upload = io.StringIO("course_title,credits,grade\nModern Physics,4,S\n" + row + "\n")
    with pytest.raises(ValueError, match=re.escape(message)):
        parse_courses(validate_courses_csv(read_csv_upload(upload)))


def test_parse_courses_from_editor_frame():
    df = pd.DataFrame(
        {
            "course_title": ["Calculus", None, "English"],
            "credits": np.array([4, 3, 3], dtype=np.int64),
            "grade": ["A", "B", "B"],
        }
    )
    courses = parse_courses(df)
    assert [c.course_title for c in courses] == ["Calculus", "English"]
    assert cgpa(courses) == pytest.approx((36 + 24) / 7)


def test_courses_to_frame(sample_courses):
    df = courses_to_frame(sample_courses)
    assert len(df) == 7
    assert df.loc[0, "course_code"] == "CSE1012"
    assert df.loc[0, "points"] == 9
    assert df.loc[5, "grade"] == "P"
    assert pd.isna(df.loc[5, "points"])


def test_apply_frame_edits_changes_grade(sample_courses):
    df = courses_to_frame(sample_courses)
    df.loc[df["id"] == 308, "grade"] = "C"
    updated = apply_frame_edits(sample_courses, df)
    assert [c.grade for c in updated if c.id == 308] == ["C"]
    assert cgpa(updated) == pytest.approx((192 - 40 + 28) / 22)


def test_apply_frame_edits_changes_credits(sample_courses):
    df = courses_to_frame(sample_courses)
    df.loc[df["id"] == 298, "credits"] = 2.0
    updated = apply_frame_edits(sample_courses, df)
    assert updated[0].credits == 2.0
    assert updated[1:] == sample_courses[1:]


def test_apply_frame_edits_without_changes(sample_courses):
    assert apply_frame_edits(sample_courses, courses_to_frame(sample_courses)) == sample_courses
