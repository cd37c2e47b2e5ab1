"""
CGPA calculator backend.

Decodes the grade data shared from the student app (base64url + gzip around
JSON, or around a JavaScript-style object literal), validates the courses and
computes semester GPAs and the overall CGPA. app.py (Streamlit) and api.py
(FastAPI) sit on top and hold no calculation logic of their own.
"""

__version__ = "0.1.0"
