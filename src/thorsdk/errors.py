"""Error taxonomy for the pool feed SDK.

Every error can carry the collaborator exception that caused it, so callers
can still inspect the original failure.
"""

from typing import Optional


class ThorSDKError(Exception):
    """Base class for all SDK errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class InvalidAssetError(ThorSDKError):
    """Raised when an asset string cannot be parsed."""

    def __init__(self, asset: object, cause: Optional[BaseException] = None):
        self.asset = asset
        super().__init__(f"Invalid asset: {asset!r}", cause)


class InvalidPhraseError(ThorSDKError):
    """Raised when the wallet layer rejects a seed phrase."""

    def __init__(self, message: str = "Invalid seed phrase", cause: Optional[BaseException] = None):
        super().__init__(message, cause)


class QuoteError(ThorSDKError):
    """Raised when a swap cannot be valued against the pool snapshot."""


class SubmissionError(ThorSDKError):
    """Raised when signing, broadcasting or explorer formatting fails."""


class RefreshFetchError(ThorSDKError):
    """Raised inside the background refresh when pools cannot be fetched."""
