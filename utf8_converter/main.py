from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from utf8_converter import __version__
from utf8_converter.config import get_settings
from utf8_converter.routes import convert

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
if settings.debug_detection:
    logging.getLogger("utf8_converter.services.encoding").setLevel(logging.DEBUG)

app = FastAPI(title="SQL UTF-8 Converter", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Source-Encoding", "X-Original-File-Name"],
)

app.include_router(convert.router)  # Base64 JSON and raw-body conversion
app.include_router(convert.encodings_router)  # Candidate catalog


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
