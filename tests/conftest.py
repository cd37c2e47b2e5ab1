# tests/conftest.py
from __future__ import annotations

import copy

import pytest

from cgpa_report.validation import Course

# Trimmed-down export from the student app: three semesters, one Pass course,
# credits sent as strings the way the app sends them.
SAMPLE_STUDENT = {
    "id": 12,
    "credits_registered": "120.0",
    "credits_earned": "116.0",
    "cgpa": "8.47",
    "courses": [
        {"id": 298, "course_code": "CSE1012", "course_title": "Problem Solving using Python",
         "course_type": "ETL", "credits": "4.0", "grade": "A", "exam_month": "Jan-2024",
         "course_distribution": "UE"},
        {"id": 299, "course_code": "ECE1002",
         "course_title": "Fundamentals of Electrical and Electronics Engineering",
         "course_type": "ETL", "credits": "4.0", "grade": "B", "exam_month": "Jan-2024",
         "course_distribution": "UE"},
        {"id": 300, "course_code": "ENG1002", "course_title": "English for Effective Communication",
         "course_type": "ETL", "credits": "3.0", "grade": "B", "exam_month": "Jan-2024",
         "course_distribution": "UE"},
        {"id": 303, "course_code": "CSE1005", "course_title": "Software Engineering",
         "course_type": "ETL", "credits": "4.0", "grade": "A", "exam_month": "Jul-2024",
         "course_distribution": "UE"},
        {"id": 305, "course_code": "MAT2004", "course_title": "Statistics for Engineers",
         "course_type": "ETL", "credits": "3.0", "grade": "B", "exam_month": "Jul-2024",
         "course_distribution": "UE"},
        {"id": 306, "course_code": "CHY1005", "course_title": "Environmental Studies",
         "course_type": "TH", "credits": "2.0", "grade": "P", "exam_month": "Jul-2024",
         "course_distribution": "UC"},
        {"id": 308, "course_code": "CSE3001", "course_title": "Data Structures and Algorithms",
         "course_type": "ETL", "credits": "4.0", "grade": "S", "exam_month": "Jan-2025",
         "course_distribution": "UE"},
    ],
}

# Same student written the way some app builds share it: no quotes anywhere.
SAMPLE_PSEUDO_JS = """{id: 12, credits_registered: 120.0, credits_earned: 116.0, cgpa: 8.47, courses: [
  {id: 298, course_code: CSE1012, course_title: Problem Solving using Python, course_type: ETL, credits: 4.0, grade: A, exam_month: Jan-2024, course_distribution: UE},
  {id: 299, course_code: ECE1002, course_title: Fundamentals of Electrical and Electronics Engineering, course_type: ETL, credits: 4.0, grade: B, exam_month: Jan-2024, course_distribution: UE},
  {id: 300, course_code: ENG1002, course_title: English for Effective Communication, course_type: ETL, credits: 3.0, grade: B, exam_month: Jan-2024, course_distribution: UE},
  {id: 303, course_code: CSE1005, course_title: Software Engineering, course_type: ETL, credits: 4.0, grade: A, exam_month: Jul-2024, course_distribution: UE},
  {id: 305, course_code: MAT2004, course_title: Statistics for Engineers, course_type: ETL, credits: 3.0, grade: B, exam_month: Jul-2024, course_distribution: UE},
  {id: 306, course_code: CHY1005, course_title: Environmental Studies, course_type: TH, credits: 2.0, grade: P, exam_month: Jul-2024, course_distribution: UC},
  {id: 308, course_code: CSE3001, course_title: Data Structures and Algorithms, course_type: ETL, credits: 4.0, grade: S, exam_month: Jan-2025, course_distribution: UE}
]}"""

# Figures for SAMPLE_STUDENT
SAMPLE_CGPA = 192 / 22
SAMPLE_SEMESTER_GPAS = {"Jan-2024": 92 / 11, "Jul-2024": 60 / 7, "Jan-2025": 10.0}


@pytest.fixture
def sample_student() -> dict:
    return copy.deepcopy(SAMPLE_STUDENT)


@pytest.fixture
def sample_courses() -> list[Course]:
    return [
        Course(
            id=c["id"],
            course_title=c["course_title"],
            credits=float(c["credits"]),
            grade=c["grade"],
            course_code=c["course_code"],
            course_type=c["course_type"],
            exam_month=c["exam_month"],
            course_distribution=c["course_distribution"],
        )
        for c in SAMPLE_STUDENT["courses"]
    ]


def make_course(grade: str, credits: float, exam_month: str = "", course_id: int = 1, title: str = "Course") -> Course:
    return Course(id=course_id, course_title=title, credits=credits, grade=grade, exam_month=exam_month)
