"""Derivative (preview) generation for validated images."""

from aws_lambda_powertools import Logger

from core.models.errors import PreviewGenerationError, UnsupportedFormatError
from core.models.image import ValidatedImage
from core.processing.resizer import PillowResizer, Resizer, ResizeError
from core.utils.constants import PREVIEW_HEIGHT, PREVIEW_WIDTH

logger = Logger(UTC=True)


class PreviewGenerator:
    """Produces fixed-size previews through a pluggable resizer."""

    def __init__(
        self,
        resizer: Resizer | None = None,
        *,
        width: int = PREVIEW_WIDTH,
        height: int = PREVIEW_HEIGHT,
    ) -> None:
        self._resizer = resizer or PillowResizer()
        self.width = width
        self.height = height

    def derive(self, image: ValidatedImage) -> ValidatedImage:
        """Create the preview of ``image``.

        The preview is named ``preview_<name>`` and its format is sniffed from
        the resized bytes, since resizing may change the encoding.

        Raises:
            PreviewGenerationError: If the image cannot be decoded for resizing
        """
        details = {"name": image.name}

        try:
            resized = self._resizer.resize(image.data, self.width, self.height)
        except ResizeError as exc:
            logger.warning(
                "Resizer could not decode image",
                extra={"image_name": image.name, "error": str(exc)},
            )
            raise PreviewGenerationError(details=details) from exc

        try:
            return ValidatedImage.create(image.preview_name, resized)
        except UnsupportedFormatError as exc:
            logger.error("Resizer returned unsupported data", extra={"image_name": image.name})
            raise PreviewGenerationError(details=details) from exc
