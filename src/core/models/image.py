"""Image records flowing through the ingestion pipeline."""

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictStr, model_validator

from core.models.errors import ImageServiceError, UnsupportedFormatError
from core.models.formats import ImageFormat, TransportKind
from core.utils.constants import PREVIEW_NAME_PREFIX
from core.utils.mime import detect_image_format


class RawItem(BaseModel):
    """Named raw bytes produced by a transport extractor."""

    model_config = ConfigDict(frozen=True)

    name: StrictStr = Field(..., description="Item name used for storage")
    data: StrictBytes = Field(..., repr=False, description="Raw submitted bytes")
    origin: TransportKind = Field(..., description="Transport the item arrived with")


class ValidatedImage(BaseModel):
    """Image whose bytes are known to be a supported container format.

    The format is always derivable from the bytes; build instances with
    ``create``, which sniffs it. Constructing one directly with bytes that do
    not sniff as ``format`` fails validation.
    """

    model_config = ConfigDict(frozen=True)

    name: StrictStr = Field(..., description="Image name used for storage")
    data: StrictBytes = Field(..., repr=False, description="Encoded image bytes")
    format: ImageFormat = Field(..., description="Sniffed container format")

    @classmethod
    def create(cls, name: str, data: bytes) -> "ValidatedImage":
        """Sniff ``data`` and wrap it as a validated image.

        Raises:
            UnsupportedFormatError: If the bytes are neither JPEG nor PNG
        """
        image_format = detect_image_format(data)
        if image_format is None:
            raise UnsupportedFormatError(details={"name": name})
        return cls(name=name, data=data, format=image_format)

    @model_validator(mode="after")
    def check_format_matches_data(self) -> "ValidatedImage":
        if detect_image_format(self.data) is not self.format:
            raise ValueError(f"Image data is not {self.format.name}")
        return self

    @property
    def extension(self) -> str:
        return self.format.extension

    @property
    def file_name(self) -> str:
        return f"{self.name}.{self.extension}"

    @property
    def preview_name(self) -> str:
        return f"{PREVIEW_NAME_PREFIX}{self.name}"


ExtractionOutcome: TypeAlias = RawItem | ImageServiceError
