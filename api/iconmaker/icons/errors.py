from __future__ import annotations


class IconError(RuntimeError):
    """Base class for icon generation and export failures."""


class RemoteGenerationFailed(IconError):
    """The remote image generator could not produce a usable image."""


class RateLimited(RemoteGenerationFailed):
    status_code = 429
    default_message = "Rate limit exceeded. Please try again later."

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)


class QuotaExceeded(RemoteGenerationFailed):
    status_code = 402
    default_message = "Usage limit reached. Please add credits to continue."

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)


class EncodingFailed(IconError):
    """PNG/ICO encoding could not proceed; nothing was written."""


class GatewayError(IconError):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = int(status)
        self.message = message
