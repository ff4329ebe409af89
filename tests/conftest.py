"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING, Any

import pytest

from dexit_module.schema import Document, RunEnv, SchemaIssue

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from dexit_module.values import JSONSchema, RuntimeValue


TEST_SCHEMA = {
    'type': 'object',
    'required': ['test'],
    'properties': {
        'test': {
            'type': 'string',
        },
    },
}


@pytest.fixture
def sample_env() -> RunEnv:
    """Provide a run environment of a fake document."""
    return RunEnv(
        document=Document(
            name='test',
            filename='test.yaml',
            full_path='/tmp/test.yaml',  # noqa: S108
        ),
        task_path='task',
        debug=False,
    )


@pytest.fixture
def valid_module() -> dict[str, Any]:
    """Provide a well-formed module definition.

    The `test` command requires `{test: string}` for both run and expect
    arguments and returns its inputs. The `noExpect` command has no
    expect handler.

    A fresh definition is built for each test, so tests may alter it
    to produce contract violations.
    """
    async def run(args: 'RuntimeValue', on_ready: 'Callable[[], None]',
                  env: 'RuntimeValue') -> dict[str, Any]:
        on_ready()
        return {
            'args': args,
            'env': env,
        }

    async def run_empty(args: 'RuntimeValue', on_ready: 'Callable[[], None]',
                        env: 'RuntimeValue') -> dict[str, Any]:
        on_ready()
        return {}

    return {
        'name': 'Module',
        'description': 'Module used in tests',
        'defaultsSchema': {
            'type': 'object',
        },
        'commands': {
            'test': {
                'description': 'Does something',
                'argsSchema': {**TEST_SCHEMA},
                'expectSchema': {**TEST_SCHEMA},
                'getLabel': lambda run_args, expect_args: 'Label',
                'run': run,
                'expect': lambda args, result, env: [],
            },
            'noExpect': {
                'description': 'Command without expect',
                'argsSchema': {},
                'run': run_empty,
            },
        },
    }


class FakeValidator:
    """Deterministic validator reporting a fixed list of issues."""

    def __init__(self, schema: 'JSONSchema') -> None:
        self.schema = schema
        self.calls: list[RuntimeValue] = []

    def validate(self, data: 'RuntimeValue') -> tuple[SchemaIssue, ...]:
        self.calls.append(data)
        if isinstance(self.schema, dict):
            return tuple(
                SchemaIssue(keyword='fake', message=message)
                for message in self.schema.get('x-fail', ())
            )
        return ()


class FakeCompiler:
    """Schema engine double recording compiled schemas.

    Schemas may declare `x-fail` messages reported on every call, and
    `x-broken` to fail compilation.
    """

    def __init__(self) -> None:
        self.validators: list[FakeValidator] = []

    def compile(self, schema: 'JSONSchema') -> FakeValidator:
        if isinstance(schema, dict) and schema.get('x-broken'):
            raise ValueError('broken schema')

        validator = FakeValidator(schema)
        self.validators.append(validator)

        return validator


@pytest.fixture
def fake_compiler() -> FakeCompiler:
    """Provide a schema engine double."""
    return FakeCompiler()
