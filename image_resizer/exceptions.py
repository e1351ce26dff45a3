"""
Image resizer — domain-specific HTTP exceptions.

Each exception carries a preset status code and a machine-readable ``code``
so the error envelope can report a category alongside the human-readable
message.  Core modules raise these directly; the app-level exception handler
in ``image_resizer.middleware.error_handler`` renders them.
"""
from fastapi import HTTPException, status


class ImageResizerError(HTTPException):
    code: str = "internal_error"
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(status_code=self.http_status, detail=message)

    @property
    def message(self) -> str:
        return str(self.detail)


# ── Request ──────────────────────────────────────────────────────────────────

class InvalidRequest(ImageResizerError):
    code = "invalid_request"
    http_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Width and height must be greater than 0.") -> None:
        super().__init__(message)


# ── Locator ──────────────────────────────────────────────────────────────────

class InvalidLocator(ImageResizerError):
    code = "invalid_locator"
    http_status = status.HTTP_400_BAD_REQUEST


# ── Image processing ─────────────────────────────────────────────────────────

class ImageProcessingError(ImageResizerError):
    code = "processing_error"


class ImageDecodeError(ImageProcessingError):
    code = "decode_error"
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to decode image: {reason}")


class ImageEncodeError(ImageProcessingError):
    code = "encode_error"

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to encode image: {reason}")


# ── Storage ──────────────────────────────────────────────────────────────────

class StorageError(ImageResizerError):
    code = "storage_error"
    http_status = status.HTTP_502_BAD_GATEWAY
