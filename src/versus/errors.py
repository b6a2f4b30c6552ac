"""
Exception taxonomy for the comparison pipeline.

Every failure the request handler knows how to report derives from
CompareError and carries the HTTP status it maps to. Parse degradation is
not an exception: the normalizer returns it as a regular value.
"""

from typing import Optional


class CompareError(Exception):
    """Base exception for comparison failures"""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ClientInputError(CompareError):
    """Malformed or insufficient request payload"""

    status_code = 400


class ConfigurationError(CompareError):
    """Required server configuration is missing"""

    status_code = 500


class UpstreamError(CompareError):
    """The generation service failed or could not be reached"""

    status_code = 502

    def __init__(self, message: str, details: Optional[str] = None,
                 upstream_status: Optional[int] = None):
        super().__init__(message, details)
        self.upstream_status = upstream_status


class RateLimitedError(UpstreamError):
    """The generation service asked us to slow down"""

    status_code = 429

    def __init__(self, message: str, retry_after: int,
                 details: Optional[str] = None,
                 upstream_status: Optional[int] = None):
        super().__init__(message, details, upstream_status)
        self.retry_after = retry_after


class EmptyResponseError(UpstreamError):
    """The generation service answered 2xx without any text"""

    status_code = 502
