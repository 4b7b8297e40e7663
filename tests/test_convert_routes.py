from __future__ import annotations

import base64
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from fastapi import HTTPException

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from utf8_converter.config import Settings  # noqa: E402
from utf8_converter.routes import convert as convert_route  # noqa: E402
from utf8_converter.services.converter import ConversionService  # noqa: E402
from utf8_converter.services.encoding import CANDIDATE_ENCODINGS  # noqa: E402

LATIN_SQL = "UPDATE clients SET city = 'Zürich' WHERE id = 7;"


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class ConvertRouteTests(unittest.TestCase):
    def test_convert_returns_callable_style_payload(self) -> None:
        payload = convert_route.ConvertRequest(
            fileName="clients.sql",
            fileContent=_b64(LATIN_SQL.encode("utf-8")),
        )
        body = convert_route.convert_file(payload)
        self.assertTrue(body["success"])
        self.assertEqual(body["originalFileName"], "clients.sql")
        self.assertEqual(body["convertedFileName"], "clients-utf8.sql")
        self.assertEqual(body["sourceEncoding"], "utf8")
        self.assertEqual(body["message"], "Successfully converted clients.sql from utf8 to UTF-8")
        self.assertEqual(base64.b64decode(body["convertedContent"]).decode("utf-8"), LATIN_SQL)

    def test_request_accepts_snake_case_fields(self) -> None:
        payload = convert_route.ConvertRequest.model_validate({
            "file_name": "clients.sql",
            "file_content": _b64(LATIN_SQL.encode("latin-1")),
            "source_encoding": "iso-8859-1",
        })
        body = convert_route.convert_file(payload)
        self.assertEqual(body["sourceEncoding"], "iso-8859-1")
        self.assertEqual(base64.b64decode(body["convertedContent"]).decode("utf-8"), LATIN_SQL)

    def test_wrong_extension_is_bad_request(self) -> None:
        payload = convert_route.ConvertRequest(fileName="clients.csv", fileContent=_b64(b"a,b"))
        with self.assertRaises(HTTPException) as ctx:
            convert_route.convert_file(payload)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.detail["kind"], "InvalidInput")

    def test_missing_content_is_bad_request(self) -> None:
        payload = convert_route.ConvertRequest(fileName="clients.sql")
        with self.assertRaises(HTTPException) as ctx:
            convert_route.convert_file(payload)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.detail["message"], "File content is required")

    def test_unknown_hint_is_bad_request(self) -> None:
        payload = convert_route.ConvertRequest(
            fileName="clients.sql",
            fileContent=_b64(b"SELECT 1;"),
            sourceEncoding="ebcdic-klingon",
        )
        with self.assertRaises(HTTPException) as ctx:
            convert_route.convert_file(payload)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.detail["kind"], "UnsupportedEncoding")

    def test_strict_decode_failure_is_unprocessable(self) -> None:
        strict = ConversionService(settings=Settings(decode_errors="strict"))
        payload = convert_route.ConvertRequest(
            fileName="clients.sql",
            fileContent=_b64(b"SELECT \xc3\x28;"),
            sourceEncoding="utf-8",
        )
        with patch.object(convert_route, "_service", return_value=strict):
            with self.assertRaises(HTTPException) as ctx:
                convert_route.convert_file(payload)
        self.assertEqual(ctx.exception.status_code, 422)
        self.assertEqual(ctx.exception.detail["kind"], "DecodeFailure")

    @patch.object(convert_route, "ConversionService")
    def test_unexpected_error_is_internal(self, mock_service) -> None:
        mock_service.return_value.convert_base64.side_effect = RuntimeError("disk on fire")
        payload = convert_route.ConvertRequest(fileName="clients.sql", fileContent=_b64(b"SELECT 1;"))
        with self.assertLogs(convert_route.logger, level="ERROR"):
            with self.assertRaises(HTTPException) as ctx:
                convert_route.convert_file(payload)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.detail["kind"], "Internal")
        self.assertEqual(ctx.exception.detail["message"], "Failed to convert file to UTF-8: disk on fire")


class ConvertRawRouteTests(unittest.TestCase):
    def test_raw_conversion_returns_attachment(self) -> None:
        response = convert_route.convert_raw_bytes("a.b.sql", LATIN_SQL.encode("utf-8"))
        self.assertEqual(response.body, LATIN_SQL.encode("utf-8"))
        self.assertIn("a.b-utf8.sql", response.headers["content-disposition"])
        self.assertTrue(response.headers["content-disposition"].startswith("attachment;"))
        self.assertEqual(response.headers["x-original-file-name"], "a.b.sql")
        self.assertEqual(response.headers["x-source-encoding"], "utf8")
        self.assertTrue(response.headers["content-type"].startswith("text/plain"))

    def test_raw_conversion_with_hint(self) -> None:
        response = convert_route.convert_raw_bytes("a.sql", LATIN_SQL.encode("cp850"), "cp850")
        self.assertEqual(response.headers["x-source-encoding"], "cp850")
        self.assertEqual(response.body.decode("utf-8"), LATIN_SQL)

    def test_raw_empty_body_is_bad_request(self) -> None:
        with self.assertRaises(HTTPException) as ctx:
            convert_route.convert_raw_bytes("a.sql", b"")
        self.assertEqual(ctx.exception.status_code, 400)


class EncodingsRouteTests(unittest.TestCase):
    def test_lists_catalog_in_order(self) -> None:
        body = convert_route.list_encodings()
        self.assertEqual(body["encodings"], list(CANDIDATE_ENCODINGS))
        self.assertEqual(body["encodings"][0], "utf8")


if __name__ == "__main__":
    unittest.main()
