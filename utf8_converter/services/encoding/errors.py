from __future__ import annotations


class ConversionError(RuntimeError):
    kind = "ConversionError"


class InvalidInput(ConversionError):
    kind = "InvalidInput"


class UnsupportedEncoding(ConversionError):
    kind = "UnsupportedEncoding"

    def __init__(self, encoding: str) -> None:
        super().__init__(f"Unsupported encoding: {encoding}")
        self.encoding = encoding


class DecodeFailure(ConversionError):
    kind = "DecodeFailure"

    def __init__(self, encoding: str, reason: str) -> None:
        super().__init__(f"Failed to decode content as {encoding}: {reason}")
        self.encoding = encoding
