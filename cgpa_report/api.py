"""
JSON/plain-text endpoints for other apps and shortcuts.

    GET  /api/calculate?data=<encoded>[&plain=1]
    POST /api/calculate   {"payload": "<encoded>"}  (or ?payload= / ?data=)
    POST /api/gpa         [{course_code, credits, grade, ...}, ...]

Run with:  uvicorn cgpa_report.api:app
"""

from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from .app_logger import get_logger
from .config import MALFORMED_DATA_MESSAGE
from .errors import PayloadError
from .pipeline import calculate_cgpa, encode_course_list

log = get_logger("api")

router = APIRouter(prefix="/api", tags=["cgpa"])
health = APIRouter(tags=["health"])


def _error(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _wants_plain(request: Request, plain: Optional[str]) -> bool:
    return plain == "1" or "text/plain" in request.headers.get("accept", "")


def _cgpa_response(encoded, request: Request, plain: Optional[str], error_message: str):
    if not isinstance(encoded, str):
        return _error(error_message)
    try:
        value = calculate_cgpa(encoded)
    except PayloadError as e:
        log.info("rejected payload (%s): %s", type(e).__name__, e)
        return _error(error_message)

    if _wants_plain(request, plain):
        return PlainTextResponse(f"{value:g}")
    return {"cgpa": value}


async def _json_body(request: Request):
    if "application/json" not in request.headers.get("content-type", ""):
        return None
    try:
        return await request.json()
    except (ValueError, RecursionError):
        return None


@router.get("/calculate")
def calculate_get(request: Request, data: Optional[str] = None, plain: Optional[str] = None):
    if not data:
        return _error(MALFORMED_DATA_MESSAGE)
    return _cgpa_response(data, request, plain, MALFORMED_DATA_MESSAGE)


@router.post("/calculate")
async def calculate_post(request: Request, plain: Optional[str] = None):
    body = await _json_body(request)
    encoded = None
    if isinstance(body, dict):
        encoded = body.get("payload") or body.get("data")
    if not encoded:
        encoded = request.query_params.get("payload") or request.query_params.get("data")
    if not encoded:
        return _error("Missing payload")
    return _cgpa_response(encoded, request, plain, "Invalid encoded payload")


@router.post("/gpa")
async def encode_courses(request: Request):
    try:
        payload = await request.json()
    except (ValueError, RecursionError):
        return _error("Failed to process course data")

    try:
        encoded = encode_course_list(payload)
    except ValueError as e:
        return _error(str(e))
    return {"encoded": encoded}


@health.get("/healthz", include_in_schema=False)
def healthz():
    return {"status": "ok"}


app = FastAPI(title="CGPA Report API")
app.include_router(router)
app.include_router(health)
