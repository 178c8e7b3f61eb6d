"""FastAPI front end for the disability case management assistant."""

from __future__ import annotations

import io
import logging
import os
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from PIL import Image, ImageDraw
from starlette.datastructures import UploadFile

from casewrite import service
from casewrite.intake import (
    DEFAULT_MAX_FILE_SIZE_MB,
    encode_file,
    validate_submission,
)
from casewrite.models.submission import ALLOWED_MIME_TYPES, DocumentSubmission
from casewrite.renderer import render_dashboard
from casewrite.utils.errors import (
    CasewriteError,
    ErrorType,
    ValidationError,
)

logger = logging.getLogger(__name__)

APP_TITLE = "Disability Case Management Assistant"
BASE_DIR = os.path.dirname(os.path.abspath(__file__))

STATUS_BY_ERROR_TYPE: Dict[ErrorType, int] = {
    ErrorType.VALIDATION_FAILED: 400,
    ErrorType.ENCODING_FAILED: 400,
    ErrorType.SUBMISSION_IN_PROGRESS: 409,
    ErrorType.MISSING_CREDENTIAL: 503,
    ErrorType.CONFIG_MISSING: 503,
    ErrorType.CONFIG_INVALID: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        service.initialize()
    except CasewriteError as e:
        # Keep serving the form; each submission reports the problem
        logger.error(f"Startup validation failed: {e}")
    yield


app = FastAPI(title=APP_TITLE, lifespan=lifespan)

app.mount("/static", StaticFiles(directory=os.path.join(BASE_DIR, "static")), name="static")
templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))


def _status_for(error_type: Optional[ErrorType]) -> int:
    return STATUS_BY_ERROR_TYPE.get(error_type, 502)


def _max_file_size_mb() -> int:
    config = service.get_config()
    return config.intake.max_file_size_mb if config else DEFAULT_MAX_FILE_SIZE_MB


@lru_cache(maxsize=1)
def _load_favicon() -> bytes:
    """Draw a small document glyph for the browser tab."""

    buffer = io.BytesIO()
    icon = Image.new("RGBA", (32, 32), (15, 23, 42, 255))
    draw = ImageDraw.Draw(icon)
    draw.rounded_rectangle((7, 4, 25, 28), radius=3, fill=(56, 189, 248, 255))
    for y in (11, 16, 21):
        draw.line((11, y, 21, y), fill=(15, 23, 42, 255), width=2)
    icon.save(buffer, format="ICO", sizes=[(32, 32), (16, 16)])
    return buffer.getvalue()


def _page_context(**overrides: Any) -> Dict[str, Any]:
    context = {
        "app_title": APP_TITLE,
        "accept": ",".join(ALLOWED_MIME_TYPES),
        "max_file_size": _max_file_size_mb(),
        "case_id": "",
        "document_content": "",
        "field_errors": {},
        "error": None,
        "dashboard": None,
    }
    context.update(overrides)
    return context


async def _read_upload(upload: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(upload, UploadFile) or not upload.filename:
        return None
    data = await upload.read()
    return {
        "filename": upload.filename,
        "content_type": upload.content_type or "application/octet-stream",
        "data": data,
    }


async def _run(submission: DocumentSubmission):
    session = service.get_session()
    return await session.submit(submission)


@app.get("/favicon.ico", include_in_schema=False)
async def favicon() -> Response:
    return Response(content=_load_favicon(), media_type="image/x-icon")


@app.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "index.html", _page_context())


@app.post("/submit", response_class=HTMLResponse)
async def submit_document(request: Request) -> HTMLResponse:
    """Validate the form, run one analysis and render the dashboard or the error."""
    form = await request.form()
    case_id = str(form.get("case_id") or "")
    document_content = str(form.get("document_content") or "")
    upload = await _read_upload(form.get("document"))

    def render(status: int, **extra: Any) -> HTMLResponse:
        context = _page_context(case_id=case_id, document_content=document_content, **extra)
        return templates.TemplateResponse(request, "index.html", context, status_code=status)

    field_errors: Dict[str, str] = {}
    file_data = None
    try:
        if upload is not None:
            file_data = encode_file(
                upload["data"],
                upload["content_type"],
                filename=upload["filename"],
                max_file_size_mb=_max_file_size_mb(),
            )
    except ValidationError as e:
        field_errors.update(e.field_errors)
    except CasewriteError as e:
        return render(_status_for(e.error_type), error=str(e))

    try:
        submission = validate_submission(case_id, document_content, file_data)
    except ValidationError as e:
        field_errors = {**e.field_errors, **field_errors}

    if field_errors:
        return render(400, field_errors=field_errors)

    try:
        outcome = await _run(submission)
    except CasewriteError as e:
        return render(_status_for(e.error_type), error=str(e))

    if not outcome.ok:
        return render(_status_for(outcome.error_type), error=outcome.error_message)

    return render(200, dashboard=render_dashboard(outcome.result))


@app.post("/api/analyze")
async def analyze_document(request: Request) -> JSONResponse:
    """JSON counterpart of /submit: camelCase DocumentSubmission in, WorkflowResult out."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        return JSONResponse(
            {"error_type": ErrorType.VALIDATION_FAILED.value, "message": "Request body must be a JSON object."},
            status_code=400,
        )

    try:
        raw = DocumentSubmission.from_payload(payload)
        submission = validate_submission(raw.case_id, raw.document_content, raw.file_data)
        outcome = await _run(submission)
    except CasewriteError as e:
        return JSONResponse(
            {"error_type": e.error_type.value, "message": str(e), **_field_errors(e)},
            status_code=_status_for(e.error_type),
        )

    if not outcome.ok:
        return JSONResponse(
            {"error_type": outcome.error_type.value, "message": outcome.error_message},
            status_code=_status_for(outcome.error_type),
        )
    return JSONResponse(outcome.result.to_dict())


def _field_errors(error: CasewriteError) -> Dict[str, Any]:
    if isinstance(error, ValidationError):
        return {"field_errors": error.field_errors}
    return {}


@app.get("/healthz")
async def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
