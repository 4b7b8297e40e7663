from __future__ import annotations

import base64
import binascii
import logging

from utf8_converter.config import Settings, get_settings
from utf8_converter.services.encoding import (
    ConversionResult,
    EncodingResolver,
    InvalidInput,
)
from utf8_converter.services.naming import converted_file_name

logger = logging.getLogger(__name__)


def success_message(file_name: str, encoding: str) -> str:
    return f"Successfully converted {file_name} from {encoding} to UTF-8"


class ConversionService:
    """Validate an uploaded SQL file, detect its encoding and re-encode it."""

    def __init__(self, settings: Settings | None = None, resolver: EncodingResolver | None = None) -> None:
        self.settings = settings or get_settings()
        self.resolver = resolver or EncodingResolver(decode_errors=self.settings.decode_errors)

    def _validate_name(self, file_name: str | None) -> str:
        name = str(file_name or "")
        if not name.strip():
            raise InvalidInput("File name is required")
        extension = self.settings.allowed_extension
        if not name.endswith(extension):
            raise InvalidInput(f"File must have {extension} extension")
        return name

    def _validate_size(self, size: int) -> None:
        if size > self.settings.max_upload_bytes:
            raise InvalidInput(
                f"File is too large: {size} bytes exceeds the {self.settings.max_upload_bytes} byte limit"
            )

    def decode_base64(self, file_content: str | None) -> bytes:
        if not file_content:
            raise InvalidInput("File content is required")
        # Base64 inflates by 4/3; reject payloads that cannot fit before decoding them.
        # The exact byte count is checked again on the decoded content.
        limit = self.settings.max_upload_bytes
        if len(file_content) > 4 * ((limit + 2) // 3):
            raise InvalidInput(f"File is too large: encoded content exceeds the {limit} byte limit")
        try:
            return base64.b64decode(file_content, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidInput("File content is not valid base64") from exc

    def convert(
        self,
        file_name: str | None,
        content: bytes | None,
        source_encoding: str | None = None,
    ) -> ConversionResult:
        name = self._validate_name(file_name)
        if not content:
            raise InvalidInput("File content is required")
        self._validate_size(len(content))

        logger.info(
            "Starting UTF-8 conversion: file=%s source_encoding=%s size=%d",
            name,
            source_encoding or "auto-detect",
            len(content),
        )
        resolution = self.resolver.resolve_detailed(content, hint=source_encoding)
        logger.info(
            "Encoding detection: file=%s encoding=%s detected=%s size=%d",
            name,
            resolution.encoding,
            resolution.detected,
            len(content),
        )

        result = ConversionResult(
            original_file_name=name,
            converted_file_name=converted_file_name(name),
            content=resolution.text,
            source_encoding=resolution.encoding,
            message=success_message(name, resolution.encoding),
            original_size=len(content),
        )
        logger.info(
            "Conversion completed successfully: original=%s converted=%s encoding=%s original_size=%d converted_size=%d",
            result.original_file_name,
            result.converted_file_name,
            result.source_encoding,
            result.original_size,
            len(result.content_bytes),
        )
        return result

    def convert_base64(
        self,
        file_name: str | None,
        file_content: str | None,
        source_encoding: str | None = None,
    ) -> ConversionResult:
        self._validate_name(file_name)
        return self.convert(file_name, self.decode_base64(file_content), source_encoding)


def to_response_payload(result: ConversionResult) -> dict:
    return {
        "success": True,
        "originalFileName": result.original_file_name,
        "convertedFileName": result.converted_file_name,
        "convertedContent": base64.b64encode(result.content_bytes).decode("ascii"),
        "sourceEncoding": result.source_encoding,
        "message": result.message,
    }
