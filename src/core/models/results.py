"""Per-item outcome records returned for a batch."""

from http import HTTPStatus

from pydantic import BaseModel, Field, StrictInt, StrictStr

from core.models.errors import ImageServiceError
from core.utils.constants import (
    ERROR_CODE_INTERNAL_ERROR,
    INTERNAL_ERROR_MESSAGE,
    SUCCESS_MESSAGE_TEMPLATE,
)


class ItemResult(BaseModel):
    """Outcome of one submitted item.

    ``code`` mirrors the HTTP status the item would have been answered with on
    its own. Messages of server-side failures are not exposed to the client.
    """

    code: StrictInt = Field(..., description="HTTP status of this item")
    message: StrictStr = Field(..., description="Human readable outcome")
    name: StrictStr | None = Field(None, description="Item name, if known")
    error: StrictStr | None = Field(None, description="Machine readable error code")

    @property
    def succeeded(self) -> bool:
        return self.code == HTTPStatus.OK

    @classmethod
    def uploaded(cls, name: str) -> "ItemResult":
        return cls(
            code=HTTPStatus.OK.value,
            message=SUCCESS_MESSAGE_TEMPLATE.format(name=name),
            name=name,
        )

    @classmethod
    def from_error(cls, exc: ImageServiceError, *, name: str | None = None) -> "ItemResult":
        status = exc.status
        message = (
            INTERNAL_ERROR_MESSAGE
            if status >= HTTPStatus.INTERNAL_SERVER_ERROR
            else exc.message
        )
        return cls(
            code=status.value,
            message=message,
            name=name or exc.item_name,
            error=exc.error_code,
        )

    @classmethod
    def internal_error(cls, *, name: str | None = None) -> "ItemResult":
        return cls(
            code=HTTPStatus.INTERNAL_SERVER_ERROR.value,
            message=INTERNAL_ERROR_MESSAGE,
            name=name,
            error=ERROR_CODE_INTERNAL_ERROR,
        )

    def to_response(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True)
