"""
Decode-and-compute entry points shared by the Streamlit app and the API.

    encoded string -> bytes -> text -> raw records -> courses -> numbers
"""

from typing import List, Tuple

from .app_logger import get_logger
from .backend_logic import cgpa, round_2dp_half_up
from .errors import NoValidCoursesError
from .recovery import Attempt, iter_record_candidates
from .transport import bytes_to_text, decode_transport, encode_json
from .validation import Course, StudentSummary, coerce_student_summary, require_courses

log = get_logger("pipeline")


def decode_text(encoded: str) -> str:
    return bytes_to_text(decode_transport(encoded))


def _decode(encoded: str) -> Tuple[Attempt, List[Course]]:
    text = decode_text(encoded)

    tried = []
    # ParseError surfaces from the chain itself when no strategy reads the text
    for attempt in iter_record_candidates(text):
        try:
            courses = require_courses(attempt.records)
        except NoValidCoursesError:
            tried.append(attempt.strategy)
            continue
        log.info("decoded %d courses via %s parse", len(courses), attempt.strategy)
        return attempt, courses

    raise NoValidCoursesError(f"no valid courses after {', '.join(tried)} parse")


def decode_courses(encoded: str) -> List[Course]:
    return _decode(encoded)[1]


def decode_student(encoded: str) -> StudentSummary:
    attempt, courses = _decode(encoded)
    return coerce_student_summary(attempt.envelope, courses)


def calculate_cgpa(encoded: str) -> float:
    return round_2dp_half_up(cgpa(decode_courses(encoded)))


# ------------------------
# Export
# ------------------------
def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def encode_course_list(payload) -> str:
    """
    Encode a list of course objects the way the student app shares them.
    Only the minimal fields are checked; the objects are encoded as given.
    """
    if not isinstance(payload, list):
        raise ValueError("Input must be an array of course objects")

    for course in payload:
        if not (
            isinstance(course, dict)
            and isinstance(course.get("course_code"), str)
            and _is_number(course.get("credits"))
            and isinstance(course.get("grade"), str)
        ):
            raise ValueError("Invalid course data structure")

    return encode_json(payload)
