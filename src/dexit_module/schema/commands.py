"""Typed module and command definitions.

Module authors describe their commands with loosely typed structures.
Once such a structure passes the contract checks it is converted into
the frozen models defined here, and the runner operates only on them.
"""

from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any, TypeAlias

from pydantic import Field, field_validator

from dexit_module.models import SchemaModel
from dexit_module.values import JSONSchema, RuntimeValue  # noqa: TC001

from .assertions import AssertionFailure  # noqa: TC001

#: Zero-argument callback a run handler invokes once its operation has
#: started (for example, a server is listening).
ReadyCallback: TypeAlias = Callable[[], None]

#: The run handler receives validated arguments, the ready callback, and
#: the run environment. It returns an awaitable resolving to the result.
RunHandler: TypeAlias = Callable[[Any, ReadyCallback, Any], Awaitable[RuntimeValue] | RuntimeValue]

#: The expect handler receives validated expectation arguments, the run
#: result, and the run environment. It returns assertion records; an
#: empty list means the expectation passed.
ExpectHandler: TypeAlias = Callable[[Any, RuntimeValue, Any], list[AssertionFailure]]

#: Produces a user-friendly task label from run and expect arguments.
LabelGetter: TypeAlias = Callable[[Any, Any], str]

#: Supplementary validator returning additional assertion records.
ArgumentsValidator: TypeAlias = Callable[[Any], list[AssertionFailure]]


class Command(SchemaModel):
    """A single operation exposed by a module."""

    description: str = Field(
        min_length=1,
        title='Command description',
    )

    args_schema: JSONSchema = Field(
        alias='argsSchema',
        title='Arguments schema',
        description='JSON schema of the run arguments.',
    )

    expect_schema: JSONSchema | None = Field(
        default=None,
        alias='expectSchema',
        title='Expectation schema',
        description=(
            'JSON schema of the expect arguments. '
            'Mandatory when an expect handler is defined.'
        ),
    )

    run: RunHandler = Field(
        title='Run handler',
    )

    expect: ExpectHandler | None = Field(
        default=None,
        title='Expect handler',
    )

    get_label: LabelGetter | None = Field(
        default=None,
        alias='getLabel',
        title='Label getter',
    )

    validate_args: ArgumentsValidator | None = Field(
        default=None,
        alias='validateArgs',
        title='Supplementary arguments validator',
    )

    validate_expect: ArgumentsValidator | None = Field(
        default=None,
        alias='validateExpect',
        title='Supplementary expectation validator',
    )


class Module(SchemaModel):
    """A pluggable definition of named test commands."""

    name: str = Field(
        min_length=1,
        title='Module name',
    )

    description: str = Field(
        min_length=1,
        title='Module description',
    )

    defaults_schema: JSONSchema = Field(
        alias='defaultsSchema',
        title='Defaults schema',
        description='JSON schema of the module-level defaults.',
    )

    commands: Mapping[str, Command] = Field(
        title='Commands',
    )

    @field_validator('commands', mode='after')
    @classmethod
    def freeze_commands(cls, value: Mapping[str, Command]) -> Mapping[str, Command]:
        """Wrap commands into a read-only mapping.

        Args:
            value: Validated commands.

        Returns:
            Read-only view over a private copy of the commands.
        """
        return MappingProxyType(dict(value))
