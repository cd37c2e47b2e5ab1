import pandas as pd
import streamlit as st

from cgpa_report.app_logger import get_logger
from cgpa_report.backend_logic import report_summary, round_2dp_half_up
from cgpa_report.config import GRADE_ORDER, GRADE_POINTS
from cgpa_report.errors import PayloadError
from cgpa_report.io_csv import (
    apply_frame_edits,
    courses_to_frame,
    parse_courses,
    read_csv_upload,
    validate_courses_csv,
)
from cgpa_report.pipeline import decode_student

log = get_logger("app")

# ------------------------
# Streamlit UI (manual entry, CSV upload or pasted app data)
# ------------------------

st.set_page_config(
    page_title="CGPA Calculator | Semester GPA & Academic Report",
    page_icon="🎓",
    layout="wide",
)

st.title("🎓 CGPA Calculator")
st.write(
    "Work out your credit-weighted CGPA on the 10-point scale. Type in your courses, "
    "upload a CSV, or paste the data shared from the student app to get a full report."
)

GRADE_LABELS = {g: f"{g} ({'Pass' if g == 'P' else GRADE_POINTS[g]})" for g in GRADE_ORDER}


def _show_summary(summary: dict, credits_line: str = None):
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Overall CGPA", f"{summary['cgpa_rounded']:.2f}")
    with col2:
        st.metric(
            "Average semester GPA",
            f"{summary['avg_gpa_rounded']:.2f}" if summary["semesters"] else "N/A",
        )
    with col3:
        st.metric("Courses", summary["course_count"])
        st.caption(f"Based on {summary['graded_course_count']} graded courses")
    with col4:
        st.metric("Credits", f"{summary['total_credits']:g}")
        if credits_line:
            st.caption(credits_line)


def _show_distribution(summary: dict):
    if not summary["distribution"]:
        return
    st.markdown("**Grade distribution**")
    dist = pd.DataFrame(
        {"Courses": list(summary["distribution"].values())},
        index=list(summary["distribution"].keys()),
    )
    st.bar_chart(dist)


manual_tab, paste_tab = st.tabs(["Enter courses", "Paste app data"])

# ------------------------
# Manual entry
# ------------------------

with manual_tab:
    with st.form("course_input_form"):
        st.subheader("1. Enter your courses")

        courses_csv = st.file_uploader(
            "Optionally upload a courses CSV (Course Title, Credits, Grade)",
            type=["csv"],
            key="courses_csv",
        )

        default_courses = pd.DataFrame(
            [
                {"course_title": "Calculus for Engineers", "credits": 4.0, "grade": "A"},
                {"course_title": "English for Effective Communication", "credits": 3.0, "grade": "B"},
            ]
        )

        courses_seed = default_courses
        upload_error = None
        if courses_csv is not None:
            try:
                courses_seed = validate_courses_csv(read_csv_upload(courses_csv))
            except Exception as e:
                upload_error = str(e)

        if upload_error:
            st.error(f"Courses CSV error: {upload_error}")

        courses_df = st.data_editor(
            courses_seed,
            key="courses_df",
            num_rows="dynamic",
            use_container_width=True,
            column_config={
                "course_title": st.column_config.TextColumn("Course title"),
                "credits": st.column_config.NumberColumn("Credits", min_value=0.5, max_value=10.0, step=0.5),
                "grade": st.column_config.SelectboxColumn("Grade", options=list(GRADE_ORDER)),
            },
        )

        submitted = st.form_submit_button("Calculate CGPA", type="primary")

    if submitted:
        if courses_csv is not None and upload_error:
            st.warning("Please fix the CSV upload error above (or remove the upload) and try again.")
        else:
            try:
                manual_courses = parse_courses(courses_df)
            except ValueError as e:
                st.error(str(e))
            else:
                if not manual_courses:
                    st.warning("Please enter at least one course (title, credits and grade).")
                else:
                    st.session_state["manual_summary"] = report_summary(manual_courses)

    if "manual_summary" in st.session_state:
        st.markdown("---")
        st.subheader("Result")
        _show_summary(st.session_state["manual_summary"])
        _show_distribution(st.session_state["manual_summary"])


# ------------------------
# Pasted / linked app data
# ------------------------

with paste_tab:
    st.markdown(
        "Open the student app → **Grades** → **Share grades**, then paste the copied text below."
    )
    linked = st.query_params.get("data") or st.query_params.get("payload") or ""
    encoded = st.text_area("Encoded academic data", value=linked, height=120)

    if st.button("Decode report", type="primary") or (linked and "student" not in st.session_state):
        try:
            student = decode_student(encoded)
        except PayloadError as e:
            log.info("could not decode pasted data: %s", e)
            st.session_state.pop("student", None)
            st.error(e.user_message)
        else:
            st.session_state["student"] = student
            st.session_state["report_courses"] = student.courses

    if "student" in st.session_state:
        student = st.session_state["student"]
        courses = st.session_state["report_courses"]

        st.markdown("---")
        if student.id is not None:
            st.caption(f"Student ID: {student.id}")

        # Grade and credit edits come back through the tables below, so the
        # figures are rebuilt from the edited list on every rerun.
        edited_tables = []
        try:
            summary = report_summary(courses)
        except PayloadError as e:
            st.error(e.user_message)
            st.stop()

        credits_line = None
        if student.credits_earned is not None and student.credits_registered is not None:
            credits_line = f"{student.credits_earned:g} earned of {student.credits_registered:g} registered"
        _show_summary(summary, credits_line)

        groups = summary["semesters"] or []
        for sem in groups:
            with st.expander(f"{sem.label} · GPA {round_2dp_half_up(sem.gpa):.2f} · {len(sem.courses)} courses", expanded=True):
                edited_tables.append(
                    st.data_editor(
                        courses_to_frame(list(sem.courses)),
                        key=f"semester_{sem.label}",
                        hide_index=True,
                        use_container_width=True,
                        disabled=["id", "course_code", "course_title", "course_type",
                                  "exam_month", "course_distribution", "points"],
                        column_config={
                            "grade": st.column_config.SelectboxColumn(
                                "Grade", options=list(GRADE_ORDER), help=", ".join(GRADE_LABELS.values())
                            ),
                            "credits": st.column_config.NumberColumn("Credits", min_value=0.0, step=0.5),
                        },
                    )
                )
        if not groups:
            edited_tables.append(
                st.data_editor(
                    courses_to_frame(courses),
                    key="all_courses",
                    hide_index=True,
                    use_container_width=True,
                    disabled=["id", "course_code", "course_title", "points"],
                    column_config={
                        "grade": st.column_config.SelectboxColumn("Grade", options=list(GRADE_ORDER)),
                    },
                )
            )

        edited = apply_frame_edits(courses, pd.concat(edited_tables, ignore_index=True))
        if edited != courses:
            st.session_state["report_courses"] = edited
            st.rerun()

        c1, c2 = st.columns([1, 5])
        with c1:
            if st.button("Reset edits"):
                st.session_state["report_courses"] = student.courses
                for sem in groups:
                    st.session_state.pop(f"semester_{sem.label}", None)
                st.session_state.pop("all_courses", None)
                st.rerun()

        _show_distribution(summary)


st.header("FAQ")

st.subheader("How is the CGPA calculated?")
st.write(
    "Each grade maps to points (S=10, A=9, B=8, C=7, D=6, E=5, F=0). The CGPA is the "
    "credit-weighted mean of those points over every graded course. Pass (P) courses "
    "earn credit but are left out of every average."
)

st.subheader("Why is the average semester GPA different from the CGPA?")
st.write(
    "The average semester GPA gives every semester the same weight, however many credits "
    "it had. The CGPA weighs every course by its credits, so heavier semesters count for more."
)

st.subheader("What data do you collect or store?")
st.write(
    "Nothing is stored. Pasted data and typed courses are used only for the on-screen "
    "calculation and are cleared when you refresh or close the page."
)
