from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, HTTPException, Query, Request, Response, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, ConfigDict, Field

from utf8_converter.config import get_settings
from utf8_converter.services.converter import ConversionService, to_response_payload
from utf8_converter.services.encoding import (
    CANDIDATE_ENCODINGS,
    ConversionError,
    DecodeFailure,
    InvalidInput,
    UnsupportedEncoding,
)

router = APIRouter(prefix="/convert", tags=["convert"])
encodings_router = APIRouter(tags=["convert"])
logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    UnsupportedEncoding: status.HTTP_400_BAD_REQUEST,
    DecodeFailure: 422,
}


class ConvertRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str | None = Field(default=None, alias="fileName")
    file_content: str | None = Field(default=None, alias="fileContent")
    source_encoding: str | None = Field(default=None, alias="sourceEncoding")


class ConvertResponse(BaseModel):
    success: bool
    originalFileName: str
    convertedFileName: str
    convertedContent: str
    sourceEncoding: str
    message: str


def _http_error(exc: Exception, file_name: str | None) -> HTTPException:
    if isinstance(exc, ConversionError):
        logger.warning("Rejected conversion: file=%s kind=%s message=%s", file_name, exc.kind, exc)
        code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        return HTTPException(status_code=code, detail={"kind": exc.kind, "message": str(exc)})
    logger.exception("Failed to convert file to UTF-8: file=%s error=%s", file_name, exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"kind": "Internal", "message": f"Failed to convert file to UTF-8: {exc}"},
    )


def _service() -> ConversionService:
    return ConversionService()


@router.post("", response_model=ConvertResponse)
def convert_file(payload: ConvertRequest) -> dict:
    try:
        result = _service().convert_base64(
            payload.file_name,
            payload.file_content,
            payload.source_encoding,
        )
    except Exception as exc:
        raise _http_error(exc, payload.file_name) from exc
    return to_response_payload(result)


def convert_raw_bytes(file_name: str, body: bytes, source_encoding: str | None = None) -> Response:
    try:
        result = _service().convert(file_name, body, source_encoding)
    except Exception as exc:
        raise _http_error(exc, file_name) from exc
    quoted_name = quote(result.converted_file_name)
    return Response(
        content=result.content_bytes,
        media_type="text/plain; charset=utf-8",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quoted_name}",
            "X-Source-Encoding": result.source_encoding,
            "X-Original-File-Name": quote(result.original_file_name),
        },
    )


def reject_oversize_upload(content_length: str | None, file_name: str | None) -> None:
    """Refuse a raw upload from its Content-Length before the body is read."""
    try:
        declared = int(content_length or "")
    except ValueError:
        return
    limit = get_settings().max_upload_bytes
    if declared > limit:
        raise _http_error(
            InvalidInput(f"File is too large: {declared} bytes exceeds the {limit} byte limit"),
            file_name,
        )


@router.post("/raw")
async def convert_raw(
    request: Request,
    file_name: str = Query(..., alias="fileName"),
    source_encoding: str | None = Query(default=None, alias="sourceEncoding"),
) -> Response:
    reject_oversize_upload(request.headers.get("content-length"), file_name)
    body = await request.body()
    return await run_in_threadpool(convert_raw_bytes, file_name, body, source_encoding)


@encodings_router.get("/encodings")
def list_encodings() -> dict:
    return {"encodings": list(CANDIDATE_ENCODINGS)}
