"""Base model for PATCH bodies."""

from typing import ClassVar

from pydantic import BaseModel, model_validator


class PartialUpdate(BaseModel):
    """Omitted fields keep their stored value.

    Fields named in `not_nullable` may be omitted but not sent as null;
    the stored record always has a value for them.
    """

    not_nullable: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_null_for_required(self) -> "PartialUpdate":
        for name in self.not_nullable:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self
