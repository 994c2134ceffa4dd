"""Pydantic models for batch upload request envelopes.

Item names are only checked for presence and type here; whether a name is
usable for storage is decided per item by the extractors, so one bad name
never rejects the whole batch.
"""

from pydantic import BaseModel, ConfigDict, Field, RootModel


class JsonImageItem(BaseModel):
    """One inline image of a JSON batch."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., description="Image name")
    data: str = Field(..., description="Base64 encoded image bytes")


class UrlImageItem(BaseModel):
    """One remotely referenced image of a URL batch."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., description="Image name")
    url: str = Field(..., min_length=1, description="Absolute http(s) URL of the image")


class JsonBatchRequest(RootModel[list[JsonImageItem]]):
    """Ordered list of inline images."""


class UrlBatchRequest(RootModel[list[UrlImageItem]]):
    """Ordered list of image URLs."""
