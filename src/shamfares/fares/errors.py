"""Error taxonomy for fare processing and the proxy boundary."""

from typing import Optional


class FaresError(Exception):
    """Base class for all fare errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FaresError):
    """Malformed caller input (bad airport code, bad date)."""

    status_code = 400


class ConfigurationError(FaresError):
    """Missing server-side credential or setting."""

    status_code = 500


class UpstreamError(FaresError):
    """Third-party API answered with a non-success status or an unreadable body."""

    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body


class FormatError(FaresError):
    """A single record failed normalization or comparison and was dropped."""

    def __init__(self, message: str, record_id: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.record_id = record_id
        self.field = field


class InvalidArgumentError(FaresError, ValueError):
    """Caller passed an out-of-range argument (month, limit, sort key)."""

    status_code = 400
