"""
OAuth Error Types

Defines the single exception raised by the WeChat OAuth layer so callers
can handle every provider failure uniformly.
"""

from typing import Optional


class OAuthError(ValueError):
    """
    Raised when an OAuth operation against WeChat fails.

    Subclasses ValueError so existing handlers that treat provider failures
    as invalid input keep working.
    """

    def __init__(self, reason: str, error_code: Optional[str] = None):
        super().__init__(reason)
        self.reason = reason
        self.error_code = error_code

    def __repr__(self) -> str:
        return f"OAuthError(reason={self.reason!r}, error_code={self.error_code!r})"
