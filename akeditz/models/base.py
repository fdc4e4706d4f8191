"""
Base commune des DTO: clés camelCase et `_id` Mongo acceptées, champs inconnus ignorés.
"""
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


def id_field() -> Any:
    return Field(default=None, validation_alias=AliasChoices("_id", "id"))


def ref_id(value: Any) -> Optional[str]:
    """Réduit une référence (id brut ou document peuplé) à son id."""
    if value is None:
        return None
    if isinstance(value, dict):
        ref = value.get("_id") or value.get("id")
        return str(ref) if ref is not None else None
    return str(value)
