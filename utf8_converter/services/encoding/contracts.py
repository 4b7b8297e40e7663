from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ScoredAttempt(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    encoding: str
    text: str
    score: int
    length: int = Field(ge=0)
    replacement_chars: int = Field(ge=0)
    sql_keywords: int = Field(ge=0)
    printable_ratio: float = Field(ge=0.0, le=1.0)
    sql_chars: int = Field(ge=0)


class EncodingResolution(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    encoding: str
    text: str
    score: int = 0
    detected: bool = True
    attempts: int = Field(default=0, ge=0)


class ConversionResult(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    original_file_name: str
    converted_file_name: str
    content: str
    source_encoding: str
    message: str
    original_size: int = Field(default=0, ge=0)

    @property
    def content_bytes(self) -> bytes:
        return self.content.encode("utf-8")
