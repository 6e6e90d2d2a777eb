"""
Shared pydantic bases for neo's models.

Command declarations, plugin manifests and config sections all derive
from one of these two classes. Models that read plugin-authored or
user-edited JSON relax ``strict`` or ``extra`` in their own model_config.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class NeoBaseModel(BaseModel):
    """Mutable base; assignments are validated like construction.

    Configuration:
        - strict: No coercion, so "1" is not accepted for an int field
        - validate_assignment: Re-check fields set after construction
        - extra: Unknown keys are an error
        - populate_by_name: Aliased fields also accept their Python name
        - use_enum_values: Enum fields hold their values
        - revalidate_instances: Nested model instances are not re-checked
    """

    model_config = ConfigDict(
        strict=True,
        validate_assignment=True,
        extra="forbid",
        populate_by_name=True,
        use_enum_values=True,
        revalidate_instances="never",
    )


class ImmutableModel(NeoBaseModel):
    """Frozen base for declarations that are read once at registration time."""

    model_config = ConfigDict(
        frozen=True,
        validate_assignment=False,
    )
