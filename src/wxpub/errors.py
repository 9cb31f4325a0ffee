"""Error taxonomy; every error is terminal for the current conversion"""

from typing import Optional


class PublishError(Exception):
    """Base class for all publishing failures."""


class FetchError(PublishError):
    """An image reference could not be read or downloaded."""

    def __init__(self, ref: str, reason: str):
        self.ref = ref
        self.reason = reason
        super().__init__(f"image read failed for {ref}: {reason}")


class EmptyImageError(PublishError):
    """An image reference resolved to zero bytes."""

    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"image is empty for {ref}")


class UploadError(PublishError):
    """The platform rejected an image or returned a malformed response."""

    def __init__(self, ref: str, size: int, reason: str):
        self.ref = ref
        self.size = size
        self.reason = reason
        super().__init__(f"image upload failed for {ref} (bytes={size}): {reason}")


class MissingTitleError(PublishError):
    def __init__(self, message: str = "missing title: provide --title or add a markdown title"):
        super().__init__(message)


class AuthError(PublishError):
    """Access token acquisition failed."""

    def __init__(self, code: Optional[int], message: str):
        self.code = code
        self.message = message
        super().__init__(f"token err {code}: {message}")


class TransportError(PublishError):
    """Non-success HTTP status or connection failure talking to the platform."""

    def __init__(self, url: str, status: Optional[int], body: str):
        self.url = url
        self.status = status
        self.body = body
        super().__init__(f"http {status if status is not None else 'error'} for {url}: {body}")


class PlatformApiError(PublishError):
    """A JSON response carried an application-level error code."""

    def __init__(self, endpoint: str, code: Optional[int], message: str):
        self.endpoint = endpoint
        self.code = code
        self.message = message
        super().__init__(f"{endpoint} err {code}: {message}")
