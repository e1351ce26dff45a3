import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from image_resizer import __version__
from image_resizer.config import get_settings
from image_resizer.middleware import (
    error_envelope_middleware,
    http_exception_handler,
    request_id_middleware,
)
from image_resizer.resize.router import router as resize_router
from image_resizer.resize.schemas import HealthResponse

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(levelname)s:%(name)s: %(message)s",
)


# ── OpenAPI metadata ──────────────────────────────────────────────────────────

_DESCRIPTION = """
## Image Resizer

On-demand resizing for images stored in S3 (or any S3-compatible store).

* **Resize**: `POST /resize` fetches the image at `s3_url`, resizes it and
  stores the result next to the original as `{stem}_{width}x{height}.{ext}`.
* **Fitting modes**: `cover` (crop to fill), `contain` (fit inside),
  `fill` (stretch), `scaledown` (contain, but never upscale).
* **Caching**: a variant that already exists is returned without reprocessing.

### Accepted URLs
`s3://bucket/key`, `https://s3.region.amazonaws.com/bucket/key`,
`https://bucket.s3.region.amazonaws.com/key`

### Error shape
All errors return a consistent JSON envelope:
```json
{ "error": { "code": "invalid_locator", "message": "..." }, "request_id": "..." }
```
"""

_TAGS_METADATA = [
    {
        "name": "resize",
        "description": "Resize stored images and return the variant's location.",
    },
]


# ── App factory ───────────────────────────────────────────────────────────────

def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Image Resizer",
        version=__version__,
        description=_DESCRIPTION,
        openapi_tags=_TAGS_METADATA,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Middleware (applied in reverse-registration order: last added = outermost)
    app.middleware("http")(error_envelope_middleware)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(resize_router)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="image-resizer")

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "image_resizer.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
