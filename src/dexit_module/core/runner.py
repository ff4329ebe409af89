"""Command runner.

The runner accepts a module definition, enforces its structural contract,
compiles validators for every declared schema, and drives the two-phase
command lifecycle: `run` performs the behavior under test, `expect`
asserts on its outcome.

Callers own liveness: `run` does not resolve until the handler has both
produced its result and signalled readiness. Hosts that need a deadline
should wrap the call, for example with `asyncio.timeout`. Cancelling the
call cancels the pending handler.
"""

from asyncio import FIRST_COMPLETED, Future, ensure_future, wait
from inspect import isawaitable
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from dexit_module.errors import (
    ArgumentsError,
    ErrorContext,
    MissingExpectError,
    SchemaCompileError,
    UnknownCommandError,
)
from dexit_module.schema import AssertionFailure
from dexit_module.settings import RunnerSettings

from .contract import ContractValidator
from .ready import ReadySignal
from .validators import JSONSchemaCompiler

if TYPE_CHECKING:
    from collections.abc import Mapping

if TYPE_CHECKING:
    from dexit_module.schema import ArgumentsValidator, Command, Module
    from dexit_module.values import JSONSchema, RuntimeValue

    from .validators import SchemaCompiler, SchemaValidator

SchemaRole: TypeAlias = Literal['defaults', 'args', 'expect']

ARGUMENTS_ERROR_MESSAGE = 'Failed to validate command arguments'
DEFAULTS_ERROR_MESSAGE = 'Failed to validate module defaults'


def _failed(task: Future[Any]) -> bool:
    """Check whether a handler task ended without a result."""
    if not task.done():
        return False

    return task.cancelled() or task.exception() is not None


class ModuleRunner:
    """Test interface of a module.

    The runner owns the typed module and its compiled validators. Both
    are read-only after construction and may be shared by concurrent
    `run` and `expect` calls.
    """

    def __init__(self, definition: 'RuntimeValue', *,
                 compiler: 'SchemaCompiler | None' = None,
                 settings: RunnerSettings | None = None,
                 strict: bool | None = None) -> None:
        """Initialize a runner for a module definition.

        Args:
            definition: Module definition (a mapping or attribute object).
            compiler: Schema engine. Defaults to the `jsonschema` engine
                configured from settings.
            settings: Runner settings. Resolved from the environment
                when not provided.
            strict: Overrides `settings.strict`.

        Raises:
            ContractError: If the definition violates the module contract.
            SchemaCompileError: If any declared schema is not valid.
        """
        if settings is None:
            settings = RunnerSettings()

        if strict is None:
            strict = settings.strict

        if compiler is None:
            compiler = JSONSchemaCompiler(
                use_defaults=settings.use_defaults,
                remove_additional=settings.remove_additional,
            )

        self.settings = settings
        self.compiler = compiler

        self._module = ContractValidator(strict=strict).validate(definition)

        self._defaults_validator = self._compile(self._module.defaults_schema, 'defaults')

        args_validators: dict[str, SchemaValidator] = {}
        expect_validators: dict[str, SchemaValidator] = {}

        for name, command in self._module.commands.items():
            args_validators[name] = self._compile(command.args_schema, 'args', name)
            if command.expect_schema is not None:
                expect_validators[name] = self._compile(command.expect_schema, 'expect', name)

        self._args_validators = MappingProxyType(args_validators)
        self._expect_validators = MappingProxyType(expect_validators)

    def __repr__(self) -> str:
        """Debug representation."""
        return f'<{type(self).__name__} module={self.name!r}>'

    @property
    def module(self) -> 'Module':
        """Typed module definition."""
        return self._module

    @property
    def name(self) -> str:
        """Module name."""
        return self._module.name

    @property
    def commands(self) -> 'Mapping[str, Command]':
        """Read-only mapping of command names to commands."""
        return self._module.commands

    def has_expect(self, command: str) -> bool:
        """Check whether a command defines an expect handler.

        Args:
            command: Command name.

        Returns:
            True if the command can be used with `expect`.

        Raises:
            UnknownCommandError: If the command is not defined.
        """
        return self.resolve(command).expect is not None

    def resolve(self, command: str) -> 'Command':
        """Resolve a command by name.

        Args:
            command: Command name.

        Returns:
            Typed command.

        Raises:
            UnknownCommandError: If the command is not defined.
        """
        if (resolved := self._module.commands.get(command)) is None:
            raise UnknownCommandError(
                f'Command {command!r} is not defined',
                context=ErrorContext(module=self.name),
            )

        return resolved

    async def run(self, command: str, args: 'RuntimeValue', env: Any) -> 'RuntimeValue':  # noqa: ANN401
        """Execute a command run handler.

        Arguments are validated (and normalized in place) before the
        handler is invoked. The result is produced once the handler
        has completed and has signalled readiness, in either order.

        Args:
            command: Command name.
            args: Run arguments.
            env: Run environment forwarded to the handler.

        Returns:
            The value produced by the handler.

        Raises:
            UnknownCommandError: If the command is not defined.
            ArgumentsError: If arguments fail validation.
            Any exception raised by the handler, unchanged.
        """
        resolved = self.resolve(command)

        self._validate(
            self._args_validators[command],
            resolved.validate_args,
            args,
            command=command,
            schema='args',
        )

        ready = ReadySignal()
        outcome = resolved.run(args, ready, env)

        if not isawaitable(outcome):
            await ready.wait()
            return outcome

        task = ensure_future(outcome)
        pending = {task, ready.future}
        try:
            while pending and not _failed(task):
                _, pending = await wait(pending, return_when=FIRST_COMPLETED)

        finally:
            if not task.done():
                task.cancel()

        return task.result()

    def expect(self, command: str, args: 'RuntimeValue',
               result: 'RuntimeValue', env: Any) -> list[AssertionFailure]:  # noqa: ANN401
        """Execute a command expect handler.

        Args:
            command: Command name.
            args: Expectation arguments.
            result: Value produced by `run`.
            env: Run environment forwarded to the handler.

        Returns:
            Assertion records returned by the handler, unmodified.
            An empty list means the expectation passed.

        Raises:
            UnknownCommandError: If the command is not defined.
            MissingExpectError: If the command has no expect handler.
            ArgumentsError: If arguments fail validation.
        """
        resolved = self.resolve(command)

        if resolved.expect is None:
            raise MissingExpectError(
                f'Command {command!r} has no expect handler',
                context=ErrorContext(module=self.name, command=command),
            )

        self._validate(
            self._expect_validators[command],
            resolved.validate_expect,
            args,
            command=command,
            schema='expect',
        )

        return resolved.expect(args, result, env)

    def get_label(self, command: str, run_args: 'RuntimeValue',
                  expect_args: 'RuntimeValue' = None) -> str:
        """Return a user-friendly label of a task.

        Args:
            command: Command name.
            run_args: Run arguments of the task.
            expect_args: Expectation arguments of the task.

        Returns:
            Label produced by the command, or its description.

        Raises:
            UnknownCommandError: If the command is not defined.
        """
        resolved = self.resolve(command)

        if resolved.get_label is None:
            return resolved.description

        return resolved.get_label(run_args, expect_args)

    def validate_defaults(self, defaults: 'RuntimeValue') -> 'RuntimeValue':
        """Validate module-level defaults.

        Args:
            defaults: Defaults to validate; normalized in place.

        Returns:
            The normalized defaults.

        Raises:
            ArgumentsError: If defaults fail validation.
        """
        self._validate(
            self._defaults_validator,
            None,
            defaults,
            schema='defaults',
            message=DEFAULTS_ERROR_MESSAGE,
        )

        return defaults

    def _compile(self, schema: 'JSONSchema', role: SchemaRole,
                 command: str | None = None) -> 'SchemaValidator':
        """Compile a declared schema.

        Args:
            schema: Schema document.
            role: Role of the schema.
            command: Command declaring the schema.

        Returns:
            Compiled validator.

        Raises:
            SchemaCompileError: If the schema is not valid.
        """
        try:
            return self.compiler.compile(schema)

        except Exception as base:
            raise SchemaCompileError(
                f'Module {self.name!r} JSON schema(s) are not valid: {base}',
                context=ErrorContext(module=self.name, command=command, schema=role),
            ) from base

    def _validate(self, validator: 'SchemaValidator',  # noqa: PLR0913
                  supplementary: 'ArgumentsValidator | None',
                  args: 'RuntimeValue', *,
                  command: str | None = None,
                  schema: SchemaRole,
                  message: str = ARGUMENTS_ERROR_MESSAGE) -> None:
        """Validate arguments collecting every failure.

        Args:
            validator: Compiled schema validator.
            supplementary: Optional module-provided validator.
            args: Arguments to validate; normalized in place.
            command: Command name.
            schema: Role of the schema.
            message: Error message on failure.

        Raises:
            ArgumentsError: If any failure was collected.
        """
        errors: list[Any] = []

        if issues := validator.validate(args):
            errors.append(AssertionFailure(message=list(issues)))

        if supplementary is not None:
            errors.extend(supplementary(args) or ())

        if errors:
            raise ArgumentsError(
                message,
                errors,
                module=self.name,
                command=command,
                schema=schema,
            )
