"""Base Pydantic models for runner data structures.

This module defines the foundational model classes used by the typed
module representation, assertion records, and runtime settings.
It enforces immutability and strict schema validation so a module,
once accepted by the runner, cannot change underneath it.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all runner data structures.

    Design principles enforced by this model:
        - Immutability: module and command definitions cannot be modified
          after they are accepted. Compiled validators stay consistent
          with the schemas they were built from.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos.

    Arbitrary types are allowed so handlers and callables can be stored
    as regular fields.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        frozen=True,
        extra='forbid',
    )


class RecordModel(BaseModel):
    """Base immutable model for records produced by third-party code.

    Unlike `SchemaModel`, unknown fields are preserved. Assertion records
    returned by module handlers may carry additional details that must
    reach the host unchanged.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        frozen=True,
        extra='allow',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runner settings.

    Design principles enforced by this model:
        - Immutability: resolved settings cannot be modified after creation.
        - Tolerant schema handling: unknown or extra fields are ignored.
          This allows the surrounding environment to contain unrelated
          variables without breaking configuration resolution.
    """

    model_config = SettingsConfigDict(
        env_prefix='DEXIT_',
        frozen=True,
        extra='ignore',
    )
