"""On-demand image resizing backed by S3-compatible object storage."""

__version__ = "1.0.0"
