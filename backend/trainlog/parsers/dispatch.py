from loguru import logger

from trainlog.core.errors import MalformedInputError, UnsupportedFormatError
from trainlog.parsers.tabular import parse_tabular
from trainlog.parsers.telemetry import parse_telemetry
from trainlog.parsers.track import parse_track
from trainlog.schemas.activity import ActivityRecord

SUPPORTED_EXTENSIONS = ("fit", "gpx", "csv")


def normalize_extension(extension: str) -> str:
    """'.FIT' -> 'fit'; also accepts a filename."""
    ext = (extension or "").strip().lower()
    if "." in ext:
        ext = ext.rsplit(".", 1)[1]
    return ext


def _as_text(content: bytes | str, fmt: str) -> str:
    if isinstance(content, str):
        return content
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedInputError(f"file is not valid UTF-8: {e}", fmt=fmt, stage="decode") from e


def parse_content(content: bytes | str, extension: str) -> ActivityRecord:
    """Route file content to the parser for its extension.

    The caller has already validated the upload; the extension decides.
    """
    ext = normalize_extension(extension)
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(extension)
    logger.debug(f"[IMPORT] Routing {len(content)} bytes to the {ext} parser")
    if ext == "fit":
        if isinstance(content, str):
            raise MalformedInputError("binary content expected", fmt="fit", stage="decode")
        return parse_telemetry(content)
    if ext == "gpx":
        return parse_track(_as_text(content, "gpx"))
    return parse_tabular(_as_text(content, "csv"))
