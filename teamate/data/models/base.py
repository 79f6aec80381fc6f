"""
Base model classes for Teamate data models.

Provides common configuration shared across all models.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class EmbeddedModel(BaseModel):
    """
    Base model for matching records.

    Accepts both snake_case field names and camelCase aliases, so records
    exchanged as JSON with other services keep their original shape. NaN and
    infinite floats are rejected.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
        allow_inf_nan=False,
    )


class FrozenModel(EmbeddedModel):
    """Immutable record; produce modified copies with model_copy(update=...)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )
