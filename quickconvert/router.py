"""
Conversion router for the /convert endpoints.

This module exposes the upload endpoint that hands files to the conversion
engine and maps its results onto HTTP responses.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from .config import KNOWN_GAPS, MAX_UPLOAD_BYTES
from .models import ConversionRequest, Failure
from .utils.conversion_core import ConversionEngine
from .utils.conversion_lookup import get_output_formats, get_supported_conversions
from .utils.error_handling import ErrorCode, create_error_response, failure_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/convert", tags=["conversions"])

# Global engine instance
_engine: Optional[ConversionEngine] = None


def get_engine() -> ConversionEngine:
    """Get the global conversion engine instance."""
    global _engine
    if _engine is None:
        _engine = ConversionEngine()
    return _engine


def parse_flag(value: Optional[str]) -> Optional[bool]:
    """Parse an optional true/false form field; raises ValueError otherwise."""
    if value is None or value.strip() == "":
        return None
    normalized = value.strip().lower()
    if normalized in ("true", "1", "yes", "on"):
        return True
    if normalized in ("false", "0", "no", "off"):
        return False
    raise ValueError(value)


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback for non-ASCII filenames."""
    ascii_name = filename.encode("ascii", "ignore").decode("ascii").replace('"', "") or "download"
    if ascii_name == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


#-- Upload converter
#-------------------------------------------------------------------------------
@router.post("")
async def convert_upload(
    file: Optional[UploadFile] = File(None),
    outputType: Optional[str] = Form(None),
    inferTypes: Optional[str] = Form(None),
    engine: ConversionEngine = Depends(get_engine),
):
    """Convert an uploaded file to the requested output format."""
    if file is None or not file.filename:
        return create_error_response(ErrorCode.MISSING_PARAMETER, message="No file uploaded")

    output_kind = (outputType or "").strip().lower()
    if not output_kind:
        return create_error_response(ErrorCode.MISSING_PARAMETER, message="No output type given")

    try:
        infer_types = parse_flag(inferTypes)
    except ValueError:
        return create_error_response(
            ErrorCode.INVALID_REQUEST,
            message=f"inferTypes must be true or false, got {inferTypes!r}",
        )

    # Whitelist and pipeline checks run before the upload is read
    preflight = engine.preflight(file.filename, file.content_type or "", output_kind)
    if isinstance(preflight, Failure):
        return failure_response(preflight)

    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        return create_error_response(
            ErrorCode.FILE_TOO_LARGE,
            message=f"File exceeds the {MAX_UPLOAD_BYTES // (1024 * 1024)}MB upload limit",
        )

    logger.info(f"Upload received: {file.filename} ({file.content_type}), {len(content) / 1024:.1f}KB")

    request = ConversionRequest.create(
        source_bytes=content,
        source_name=file.filename,
        declared_mime=file.content_type,
        requested_output_kind=output_kind,
        infer_types=infer_types,
    )
    result = await run_in_threadpool(engine.convert, request)

    if isinstance(result, Failure):
        return failure_response(result)

    headers = {
        "Content-Disposition": content_disposition(result.suggested_filename),
        "X-Conversion-Pipeline": result.pipeline_id.value,
    }
    if result.diagnostic_report:
        headers["X-Conversion-Report"] = "diagnostic"

    return Response(content=result.payload, media_type=result.content_kind, headers=headers)


#-- Utility endpoints
#-------------------------------------------------------------------------------
@router.get("/supported")
async def get_supported_conversions_endpoint():
    """Get all supported conversion pairs, known output formats and recognized gaps"""
    return JSONResponse(content={
        "supported_conversions": get_supported_conversions(),
        "output_formats": get_output_formats(),
        "known_gaps": KNOWN_GAPS,
    })
