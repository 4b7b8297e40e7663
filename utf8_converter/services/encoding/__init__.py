from .catalog import CANDIDATE_ENCODINGS, DEFAULT_ENCODING, codec_name, decode_bytes
from .contracts import ConversionResult, EncodingResolution, ScoredAttempt
from .errors import ConversionError, DecodeFailure, InvalidInput, UnsupportedEncoding
from .resolver import EncodingResolver, resolve_encoding, score_text

__all__ = [
    "CANDIDATE_ENCODINGS",
    "DEFAULT_ENCODING",
    "codec_name",
    "decode_bytes",
    "ConversionResult",
    "EncodingResolution",
    "ScoredAttempt",
    "ConversionError",
    "DecodeFailure",
    "InvalidInput",
    "UnsupportedEncoding",
    "EncodingResolver",
    "resolve_encoding",
    "score_text",
]
