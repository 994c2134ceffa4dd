"""Image Ingestion Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Batch image ingestion over JSON, URL and multipart transports with preview generation"
)

__all__ = ["handlers", "core"]
