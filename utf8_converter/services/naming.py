from __future__ import annotations

from pathlib import PurePosixPath

OUTPUT_SUFFIX = "-utf8"


def converted_file_name(file_name: str) -> str:
    """``orders.sql`` -> ``orders-utf8.sql``; only the last dot starts the extension."""
    # Uploads from Windows clients may carry backslash separated paths.
    base = PurePosixPath(str(file_name).replace("\\", "/")).name
    path = PurePosixPath(base)
    return f"{path.stem}{OUTPUT_SUFFIX}{path.suffix}"
