"""
app/core/errors.py
Error taxonomy. Each class carries the HTTP status it is rendered with;
app/main.py turns them into {"error": "..."} bodies.
"""

from typing import Optional


class ProxyError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(ProxyError):
    """A required credential or setting is missing."""
    status_code = 500


class ClientInputError(ProxyError):
    """Unknown action or a missing/invalid request parameter."""
    status_code = 400


class UpstreamError(ProxyError):
    """Tasty answered with a non-2xx status, or could not be reached at all."""
    status_code = 500

    def __init__(self, upstream_status: Optional[int], message: Optional[str] = None):
        if message is None:
            message = (
                f"Tasty API error: {upstream_status}"
                if upstream_status is not None else "Tasty API unreachable"
            )
        super().__init__(message)
        self.upstream_status = upstream_status

    @property
    def transient(self) -> bool:
        s = self.upstream_status
        return s is None or s == 429 or s >= 500
