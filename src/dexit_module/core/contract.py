"""Structural contract enforcement for module definitions.

Module definitions are authored by third parties and are untrusted. This
module inspects a candidate definition before any schema compilation is
attempted and converts it into the typed `Module` representation.

Definitions may be mappings or attribute objects (a Python module, a
namespace, a class instance). Field names are accepted both in
snake_case and in camelCase.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from warnings import warn

from pydantic import ValidationError

from dexit_module.errors import ContractError, ErrorContext, ModuleWarning
from dexit_module.schema import Command, Module
from dexit_module.values import is_schema, is_structured

if TYPE_CHECKING:
    from dexit_module.values import RuntimeValue

#: Accepted spellings of definition fields.
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    'defaults_schema': ('defaults_schema', 'defaultsSchema'),
    'args_schema': ('args_schema', 'argsSchema'),
    'expect_schema': ('expect_schema', 'expectSchema'),
    'get_label': ('get_label', 'getLabel'),
    'validate_args': ('validate_args', 'validateArgs'),
    'validate_expect': ('validate_expect', 'validateExpect'),
}

#: Field names used by the runner for validator bookkeeping.
RESERVED_FIELDS = (
    '_args_validator',
    '_expect_validator',
    '_argsValidator',
    '_expectValidator',
)

OPTIONAL_HANDLERS = (
    'expect',
    'get_label',
    'validate_args',
    'validate_expect',
)


def lookup(source: 'RuntimeValue', field: str) -> 'RuntimeValue':
    """Read a definition field from a mapping or an attribute object.

    Args:
        source: Structured definition object.
        field: Canonical (snake_case) field name.

    Returns:
        The field value, or `None` if the field is absent.
    """
    for key in FIELD_ALIASES.get(field, (field,)):
        if isinstance(source, Mapping):
            if source.get(key) is not None:
                return source[key]
        elif getattr(source, key, None) is not None:
            return getattr(source, key)

    return None


class ContractValidator:
    """Validator of the module structural contract.

    Checks are evaluated in a fixed order and the first violation is
    raised as a `ContractError` naming the rule and the command.

    Attributes:
        strict_mode: If True, non-fatal inconsistencies raise an error.
            If False, they are emitted as warnings.
    """

    def __init__(self, *, strict: bool = False) -> None:
        """Initialize a contract validator.

        Args:
            strict: Raise on non-fatal inconsistencies.
        """
        self.strict_mode = strict

    def validate(self, definition: 'RuntimeValue') -> Module:
        """Validate a module definition and build its typed form.

        The definition itself is never modified.

        Args:
            definition: Untrusted module definition.

        Returns:
            Typed immutable module.

        Raises:
            ContractError: If the definition violates the contract.
        """
        self.validate_module(definition)

        name = lookup(definition, 'name')
        commands = lookup(definition, 'commands')

        for command_name, command in commands.items():
            self.validate_command(name, command_name, command)

        try:
            return Module(
                name=name,
                description=lookup(definition, 'description'),
                defaults_schema=lookup(definition, 'defaults_schema'),
                commands={
                    command_name: self.build_command(name, command_name, command)
                    for command_name, command in commands.items()
                },
            )

        except ValidationError as base:
            raise ContractError(
                'Module definition is not valid',
                context=ErrorContext(module=name),
            ) from base

    def validate_module(self, definition: 'RuntimeValue') -> None:
        """Check module-level rules.

        Args:
            definition: Untrusted module definition.

        Raises:
            ContractError: If a module-level rule is violated.
        """
        if not is_structured(definition):
            raise ContractError('Module definition must be a structured object')

        name = lookup(definition, 'name')
        if not isinstance(name, str) or not name:
            raise ContractError("Module definition must have a non-empty 'name' property")

        context = ErrorContext(module=name)

        description = lookup(definition, 'description')
        if not isinstance(description, str) or not description.strip():
            raise ContractError(
                "Module definition must have a non-empty 'description' property",
                context=context,
            )

        if not is_schema(lookup(definition, 'defaults_schema')):
            raise ContractError(
                "Module definition must have a 'defaults_schema' property "
                'which must be a valid JSON schema object',
                context=context,
            )

        commands = lookup(definition, 'commands')
        if commands is None:
            raise ContractError(
                "Module definition must have a 'commands' property",
                context=context,
            )

        if not isinstance(commands, Mapping):
            raise ContractError(
                "Module property 'commands' must be a mapping",
                context=context,
            )

        for command_name in commands:
            if not isinstance(command_name, str) or not command_name:
                raise ContractError(
                    f'Module command name {command_name!r} must be a non-empty string',
                    context=context,
                )

    def validate_command(self, module: str, name: str,  # noqa: C901
                         command: 'RuntimeValue') -> None:
        """Check command-level rules.

        Args:
            module: Name of the module owning the command.
            name: Command name.
            command: Untrusted command definition.

        Raises:
            ContractError: If a command-level rule is violated.
        """
        context = ErrorContext(module=module, command=name)

        if not is_structured(command):
            raise ContractError(
                f'Module command {name!r} must be a structured object',
                context=context,
            )

        description = lookup(command, 'description')
        if not isinstance(description, str) or not description:
            raise ContractError(
                f"Module command {name!r} definition must have 'description' property",
                context=context,
            )

        run = lookup(command, 'run')
        if run is None:
            raise ContractError(
                f"Module command {name!r} definition must have 'run' property",
                context=context,
            )

        if not callable(run):
            raise ContractError(
                f"Module command {name!r} definition property 'run' must be callable",
                context=context,
            )

        for field in OPTIONAL_HANDLERS:
            handler = lookup(command, field)
            if handler is not None and not callable(handler):
                raise ContractError(
                    f'Module command {name!r} definition property {field!r} must be callable',
                    context=context,
                )

        if not is_schema(lookup(command, 'args_schema')):
            raise ContractError(
                f"Module command {name!r} definition must have 'args_schema' property "
                'which must be a valid JSON schema object',
                context=context,
            )

        has_expect = lookup(command, 'expect') is not None
        expect_schema = lookup(command, 'expect_schema')

        if has_expect and not is_schema(expect_schema):
            raise ContractError(
                f"Module command {name!r} definition must have 'expect_schema' property "
                'which must be a valid JSON schema object',
                context=context,
            )

        for field in RESERVED_FIELDS:
            if lookup(command, field) is not None:
                raise ContractError(
                    f'Module command {name!r} can not have {field!r} property '
                    'because it is reserved',
                    context=context,
                )

        if not has_expect and expect_schema is not None and (error := self.emit_contract_issue(
            f"Module command {name!r} declares 'expect_schema' without 'expect' handler",
            context,
        )):
            raise error

        if not has_expect and lookup(command, 'validate_expect') is not None and (
            error := self.emit_contract_issue(
                f"Module command {name!r} declares 'validate_expect' without 'expect' handler",
                context,
            )
        ):
            raise error

    def build_command(self, module: str, name: str, command: 'RuntimeValue') -> Command:
        """Build the typed form of a validated command.

        Args:
            module: Name of the module owning the command.
            name: Command name.
            command: Validated command definition.

        Returns:
            Typed immutable command.

        Raises:
            ContractError: If the command can not be represented.
        """
        fields: dict[str, Any] = {
            field: lookup(command, field)
            for field in Command.model_fields
        }

        try:
            return Command(**fields)

        except ValidationError as base:
            raise ContractError(
                f'Module command {name!r} definition is not valid',
                context=ErrorContext(module=module, command=name),
            ) from base

    def emit_contract_issue(self, message: str,
                            context: ErrorContext | None = None) -> Exception | None:
        """Emit a contract warning or return the exception.

        Args:
            message: Warning message to emit.
            context: Error context of the issue.

        Returns:
            ContractError on strict mode, otherwise `None`
                with producing a ModuleWarning.
        """
        if self.strict_mode:
            return ContractError(message, context=context)

        warn(message, category=ModuleWarning, stacklevel=3)

        return None
