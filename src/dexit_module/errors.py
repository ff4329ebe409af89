"""Core exception hierarchy.

This module defines base error and warning types used across the library
to report module contract violations, schema compilation failures,
command dispatch errors, and argument validation failures in a structured
and extensible way.
"""

from os import linesep
from typing import TYPE_CHECKING, Any, TypedDict

from pydantic import BaseModel
from yaml import dump

from dexit_module.values import MAPPINGS, SCALARS, SEQUENCES

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from dexit_module.schema import AssertionFailure

SNIPPET_ELLIPSIS = f' ...{linesep}'
SNIPPET_INDENT = 2

FORMAT_REPLACER = '<runtime object>'
FORMAT_MODULE = '<unnamed module>'
FORMAT_INDENT = 4


class ErrorContext(TypedDict, total=False):
    """Container describing contextual information for error formatting.

    All fields are optional; the formatter adapts output based on
    provided values.
    """

    #: Name of the module where the error occurred.
    module: str | None
    #: Name of the command where the error occurred.
    command: str | None
    #: Role of the schema involved (`defaults`, `args`, `expect`).
    schema: str | None

    #: Assertion records collected during validation.
    errors: 'list[AssertionFailure | Any] | None'


class ErrorFormatter:
    """Utility class for formatting runner errors.

    This formatter is responsible for producing human-readable error
    messages with optional module location and YAML-based snippets
    of the collected assertion records.
    """

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Format an error message using contextual information.

        Args:
            message: Base human-readable error message.
            context: Optional error context with location and records.

        Returns:
            A fully formatted error message suitable for display.
        """
        if not context:
            return message

        message += linesep
        message += cls.get_location_string(context, indent=FORMAT_INDENT)
        message += cls.get_snippet_string(context, indent=FORMAT_INDENT * 2)

        return message

    @classmethod
    def get_location_string(cls, context: ErrorContext, *,
                            indent: str | int | None = None) -> str:
        """Format module and command location information.

        Args:
            context: Error context containing location metadata.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted location string including module, command,
            and schema role when available.
        """
        indent = cls._ensure_indent(indent)

        module = context.get('module')
        if not module:
            module = FORMAT_MODULE

        message = f'{indent}in module "{module}"'
        if command := context.get('command'):
            message += f', command "{command}"'
        if schema := context.get('schema'):
            message += f', {schema} schema'
        message += linesep

        return message

    @classmethod
    def get_snippet_string(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> str:
        """Generate a formatted snippet listing collected errors.

        Args:
            context: Error context containing assertion records.
            indent: Optional indentation (string or number of spaces).

        Returns:
            A formatted multi-line snippet string, or an empty string
            if no records are available.
        """
        indent = cls._ensure_indent(indent)

        if errors := context.get('errors'):
            return cls._make_snippet(errors, indent)

        return ''

    @classmethod
    def _make_snippet(cls, errors: 'Iterable[Any]', indent: str) -> str:
        """Build a YAML-based snippet for assertion records.

        Args:
            errors: Records associated with the error.
            indent: String indentation prefix.

        Returns:
            A formatted snippet string.
        """
        snippet = f'{indent}{SNIPPET_ELLIPSIS}'
        snippet += cls._make_yaml({'errors': list(errors)}, indent)
        snippet += linesep

        return snippet

    @classmethod
    def _filter_unsafe(cls, value: Any) -> Any:  # noqa: ANN401
        """Recursively sanitize values for safe YAML serialization.

        Pydantic models are dumped into plain structures. Non-scalar and
        non-container objects are replaced with a placeholder to prevent
        leaking executable or opaque data.

        Args:
            value: Arbitrary value to sanitize.

        Returns:
            A YAML-safe representation of the value.
        """
        if value is None or isinstance(value, SCALARS):
            return value

        if isinstance(value, BaseModel):
            return cls._filter_unsafe(value.model_dump(
                exclude_none=True,
                by_alias=True,
            ))

        if isinstance(value, MAPPINGS):
            return {
                key: cls._filter_unsafe(item)
                for key, item in value.items()
            }

        if isinstance(value, SEQUENCES):
            return [
                cls._filter_unsafe(item)
                for item in value
            ]

        return FORMAT_REPLACER

    @classmethod
    def _make_yaml(cls, value: Any, indent: str = '') -> str:  # noqa: ANN401
        """Serialize a value to a YAML-formatted string.

        Args:
            value: Arbitrary value to serialize.
            indent: Optional indentation prefix.

        Returns:
            A YAML-formatted string representation of the value.
        """
        data = dump(
            cls._filter_unsafe(value),
            indent=SNIPPET_INDENT,
            sort_keys=False,
        )

        return cls._make_indent(data, indent)

    @staticmethod
    def _make_indent(value: str, indent: str) -> str:
        """Apply indentation to a multi-line string.

        Empty or whitespace-only lines are omitted.

        Args:
            value: Original multi-line string.
            indent: Indentation prefix.

        Returns:
            Indented string.
        """
        if not indent:
            return value

        return linesep.join(
            f'{indent}{line}'
            for line in value.splitlines()
            if line.strip()
        )

    @staticmethod
    def _ensure_indent(indent: str | int | None = None) -> str:
        """Normalize indentation input.

        Args:
            indent: Indentation as string or number of spaces.

        Returns:
            A string consisting of spaces or the provided string.
        """
        if isinstance(indent, int) and indent > 0:
            return ' ' * indent

        if isinstance(indent, str):
            return indent

        return ''


class ModuleWarning(UserWarning):
    """Warning emitted for non-fatal module contract issues.

    This warning is used when a module definition is inconsistent
    but still usable (for example, an expectation schema declared
    on a command without an expect handler).
    """


class ModuleError(Exception, ErrorFormatter):
    """Base exception for all module runner errors.

    All custom exceptions raised by the library inherit from this
    class to allow unified error handling by hosts.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Error context with module location and records.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """String representation."""
        return self.format(self.message, self.context)

    @property
    def module(self) -> str | None:
        """Name of the module associated with the error."""
        if not self.context:
            return None

        return self.context.get('module')

    @property
    def command(self) -> str | None:
        """Name of the command associated with the error."""
        if not self.context:
            return None

        return self.context.get('command')


class ContractError(ModuleError):
    """Error raised when a module definition violates the contract.

    The message identifies the violated rule. For command-level rules
    the error context carries the offending command name.
    """


class SchemaCompileError(ModuleError):
    """Error raised when a declared JSON schema is not valid.

    The error context carries the module identity and the role of the
    failing schema. The underlying schema engine error is chained.
    """


class UnknownCommandError(ModuleError):
    """Error raised when a command is not defined by the module.

    Indicates a caller or configuration bug, not a test failure.
    """


class MissingExpectError(ModuleError):
    """Error raised when `expect` is called on a command without handler.

    Indicates a caller bug, not an assertion failure.
    """


class ArgumentsError(ModuleError):
    """Error raised when command arguments fail validation.

    Carries the complete list of schema and supplementary validation
    failures collected for a single call, so the host can report every
    violation at once.
    """

    def __init__(self, message: str, errors: 'Iterable[AssertionFailure | Any]', *,
                 module: str | None = None,
                 command: str | None = None,
                 schema: str | None = None) -> None:
        """Initialize an arguments validation error.

        Args:
            message: Human-readable error description.
            errors: All collected assertion records.
            module: Name of the module.
            command: Name of the command.
            schema: Role of the schema used for validation.
        """
        self.errors = list(errors)

        super().__init__(message, context=ErrorContext(
            module=module,
            command=command,
            schema=schema,
            errors=self.errors,
        ))
