from __future__ import annotations

import codecs

from .errors import UnsupportedEncoding

# Iteration order is the tie-break order for detection.
CANDIDATE_ENCODINGS: tuple[str, ...] = (
    "utf8",
    "utf-8",
    "windows-1251",
    "cp1251",
    "windows-1252",
    "cp1252",
    "iso-8859-1",
    "latin1",
    "iso-8859-2",
    "latin2",
    "iso-8859-5",
    "cyrillic",
    "koi8-r",
    "koi8-u",
    "cp866",
    "ibm866",
    "cp850",
    "ibm850",
    "macintosh",
    "mac",
    "utf-16le",
    "utf-16be",
    "utf-32le",
    "utf-32be",
    "ascii",
)

DEFAULT_ENCODING = "utf8"
DECODE_ERROR_POLICIES = {"replace", "strict"}

# Catalog names Python's codec registry does not know by the same spelling.
_CODEC_ALIASES = {
    "mac": "mac_roman",
}
_BOM = "\ufeff"


def normalize_encoding_name(name: str | None) -> str:
    return str(name or "").strip().lower()


def codec_name(encoding: str) -> str:
    """Map an encoding name to the Python codec that implements it.

    Raises ``UnsupportedEncoding`` when neither the catalog aliases nor the
    codec registry recognise the name, or when the codec is not a text codec.
    """
    normalized = normalize_encoding_name(encoding)
    if not normalized:
        raise UnsupportedEncoding(str(encoding))
    target = _CODEC_ALIASES.get(normalized, normalized)
    try:
        info = codecs.lookup(target)
    except LookupError as exc:
        raise UnsupportedEncoding(str(encoding)) from exc
    if not getattr(info, "_is_text_encoding", True):
        raise UnsupportedEncoding(str(encoding))
    return info.name


def decode_bytes(buffer: bytes, encoding: str, errors: str = "replace") -> str:
    """Decode ``buffer`` the way the converter's codec layer does.

    A single leading byte-order mark is dropped from the result.
    """
    text = bytes(buffer).decode(codec_name(encoding), errors=errors)
    if text.startswith(_BOM):
        text = text[1:]
    return text
