"""Reusable pydantic base model for persisted configuration."""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_pascal


class ConfigModel(BaseModel):
    """
    An immutable model that serializes field names in PascalCase.

    The field name `addr_filters` is written as `AddrFilters`, matching the
    key layout of libp2p node configuration files.

    Unknown keys are kept so that a read-modify-write cycle never drops
    configuration owned by other components.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        validate_default=True,
        extra="allow",
        frozen=True,
    )

    def copy(self: Self, **kwargs: Any) -> Self:
        """Create a copy of the model with the updated fields that are validated."""
        return self.__class__(**(self.model_dump(by_alias=True) | _aliased(self, kwargs)))


def _aliased(model: BaseModel, updates: dict[str, Any]) -> dict[str, Any]:
    """Translate field names in `updates` to their serialization aliases."""
    fields = type(model).model_fields
    return {
        (fields[name].alias or name) if name in fields else name: value
        for name, value in updates.items()
    }
