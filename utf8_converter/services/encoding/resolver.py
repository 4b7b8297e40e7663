from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .catalog import (
    CANDIDATE_ENCODINGS,
    DECODE_ERROR_POLICIES,
    DEFAULT_ENCODING,
    codec_name,
    decode_bytes,
)
from .contracts import EncodingResolution, ScoredAttempt
from .errors import DecodeFailure, InvalidInput, UnsupportedEncoding

logger = logging.getLogger(__name__)

SQL_KEYWORDS = ("SELECT", "INSERT", "UPDATE", "DELETE", "CREATE", "DROP", "ALTER", "TABLE", "FROM", "WHERE")
SQL_CHARS = frozenset(";(),'\"")
REPLACEMENT_CHAR = "\ufffd"

NO_REPLACEMENT_BONUS = 100
REPLACEMENT_PENALTY = 10
NON_EMPTY_BONUS = 50
KEYWORD_BONUS = 5
PRINTABLE_RATIO_MIN = 0.8
PRINTABLE_BONUS = 30
SQL_CHARS_CAP = 20


def _is_control(char: str) -> bool:
    code = ord(char)
    return code <= 0x1F or 0x7F <= code <= 0x9F


def _printable_ratio(text: str) -> float:
    if not text:
        return 0.0
    printable = sum(1 for char in text if not _is_control(char))
    return printable / len(text)


def score_text(encoding: str, text: str) -> ScoredAttempt:
    """Score how plausible ``text`` is as a decoded SQL script."""
    score = 0

    replacement_chars = text.count(REPLACEMENT_CHAR)
    if replacement_chars == 0:
        score += NO_REPLACEMENT_BONUS
    else:
        score -= replacement_chars * REPLACEMENT_PENALTY

    if text:
        score += NON_EMPTY_BONUS

    upper = text.upper()
    sql_keywords = sum(1 for keyword in SQL_KEYWORDS if keyword in upper)
    score += sql_keywords * KEYWORD_BONUS

    printable_ratio = _printable_ratio(text)
    if printable_ratio > PRINTABLE_RATIO_MIN:
        score += PRINTABLE_BONUS

    sql_chars = sum(1 for char in text if char in SQL_CHARS)
    score += min(sql_chars, SQL_CHARS_CAP)

    return ScoredAttempt(
        encoding=encoding,
        text=text,
        score=score,
        length=len(text),
        replacement_chars=replacement_chars,
        sql_keywords=sql_keywords,
        printable_ratio=printable_ratio,
        sql_chars=sql_chars,
    )


class EncodingResolver:
    """Pick the source encoding of a byte buffer and decode it.

    Without a hint every catalog encoding is tried in order and the decoded
    text with the highest heuristic score wins; the earliest candidate keeps
    a tie. Candidates whose decode raises are skipped without a score.
    """

    def __init__(
        self,
        candidates: Sequence[str] = CANDIDATE_ENCODINGS,
        decode_errors: str = "replace",
    ) -> None:
        if decode_errors not in DECODE_ERROR_POLICIES:
            raise ValueError(f"decode_errors must be one of {sorted(DECODE_ERROR_POLICIES)}, got {decode_errors!r}")
        self.candidates = tuple(candidates)
        self.decode_errors = decode_errors

    def resolve(self, buffer: bytes | None, hint: str | None = None) -> tuple[str, str]:
        resolution = self.resolve_detailed(buffer, hint=hint)
        return resolution.encoding, resolution.text

    def resolve_detailed(self, buffer: bytes | None, hint: str | None = None) -> EncodingResolution:
        if not buffer:
            raise InvalidInput("File content is required")
        if hint is not None and str(hint).strip():
            return self._decode_with_hint(buffer, str(hint).strip())
        return self._detect(buffer)

    def _decode_with_hint(self, buffer: bytes, hint: str) -> EncodingResolution:
        # Raises UnsupportedEncoding before any decode is attempted.
        codec_name(hint)
        try:
            text = decode_bytes(buffer, hint, errors=self.decode_errors)
        except UnicodeError as exc:
            raise DecodeFailure(hint, str(exc)) from exc
        return EncodingResolution(encoding=hint, text=text, detected=False)

    def _attempts(self, buffer: bytes) -> Iterable[ScoredAttempt]:
        for encoding in self.candidates:
            try:
                decoded = decode_bytes(buffer, encoding, errors=self.decode_errors)
            except (UnicodeError, UnsupportedEncoding):
                continue
            attempt = score_text(encoding, decoded)
            logger.debug(
                "Encoding detection attempt: encoding=%s score=%d length=%d replacement_chars=%d "
                "sql_keywords=%d printable_ratio=%.2f",
                attempt.encoding,
                attempt.score,
                attempt.length,
                attempt.replacement_chars,
                attempt.sql_keywords,
                attempt.printable_ratio,
            )
            yield attempt

    def _detect(self, buffer: bytes) -> EncodingResolution:
        best: ScoredAttempt | None = None
        best_score = 0
        tried = 0
        for attempt in self._attempts(buffer):
            tried += 1
            if attempt.score > best_score:
                best = attempt
                best_score = attempt.score

        if best is not None:
            encoding, text = best.encoding, best.text
        else:
            # Nothing beat the initial (utf8, 0) choice, or nothing decoded at all.
            if not tried:
                logger.warning("Every candidate encoding failed to decode; falling back to lossy %s", DEFAULT_ENCODING)
            encoding = DEFAULT_ENCODING
            text = decode_bytes(buffer, DEFAULT_ENCODING, errors="replace")

        logger.info(
            "Encoding auto-detection completed: detected=%s score=%d tried=%d total=%d",
            encoding,
            best_score,
            tried,
            len(self.candidates),
        )
        return EncodingResolution(encoding=encoding, text=text, score=best_score, detected=True, attempts=tried)


def resolve_encoding(buffer: bytes | None, hint: str | None = None, *, decode_errors: str = "replace") -> tuple[str, str]:
    return EncodingResolver(decode_errors=decode_errors).resolve(buffer, hint=hint)
