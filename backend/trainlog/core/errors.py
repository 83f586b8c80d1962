"""Parse error types.

Every structural failure while turning a file into an activity record is
raised as one of these, so the import boundary can tell an unreadable file
from a file that simply has no track.

- ParseError: base class, carries the file format and the failing stage
- MalformedInputError: required structure missing or undecodable
- NoTrackError: GPX file without a usable track
- EmptyFileError: CSV file without data rows
- MissingColumnError: CSV file without a required column
- UnsupportedFormatError: no parser for the file extension
"""


class ParseError(ValueError):
    """Raised when an activity file cannot be turned into a record.

    Attributes:
        fmt: File format being parsed ("fit", "gpx", "csv")
        stage: Parsing stage that failed (e.g. "decode", "session", "field:avg_power")
    """

    def __init__(self, message: str, fmt: str | None = None, stage: str | None = None):
        self.fmt = fmt
        self.stage = stage
        self.message = message
        prefix = ":".join(p for p in (fmt, stage) if p)
        super().__init__(f"[{prefix}] {message}" if prefix else message)


class MalformedInputError(ParseError):
    pass


class NoTrackError(MalformedInputError):
    def __init__(self, message: str = "no track found", stage: str = "track"):
        super().__init__(message, fmt="gpx", stage=stage)


class EmptyFileError(MalformedInputError):
    def __init__(self, message: str = "empty file", fmt: str = "csv"):
        super().__init__(message, fmt=fmt, stage="rows")


class MissingColumnError(MalformedInputError):
    def __init__(self, column: str):
        self.column = column
        super().__init__(f"missing required column '{column}'", fmt="csv", stage="header")


class UnsupportedFormatError(ParseError):
    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"unsupported file type: {extension!r}", stage="routing")
