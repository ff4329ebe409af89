"""Tests for error formatting."""

from os import linesep

import pytest

from dexit_module.errors import ArgumentsError, ErrorContext, ModuleError
from dexit_module.schema import AssertionFailure, SchemaIssue


def test_plain_message() -> None:
    """Test errors without context render the message only."""
    assert str(ModuleError('Something failed')) == 'Something failed'


@pytest.mark.parametrize('context, location', (
    pytest.param(
        ErrorContext(),
        None,
        id='empty context',
    ),
    pytest.param(
        ErrorContext(module='http'),
        '    in module "http"',
        id='module',
    ),
    pytest.param(
        ErrorContext(module='http', command='get'),
        '    in module "http", command "get"',
        id='module and command',
    ),
    pytest.param(
        ErrorContext(module='http', command='get', schema='args'),
        '    in module "http", command "get", args schema',
        id='module, command and schema',
    ),
    pytest.param(
        ErrorContext(command='get'),
        '    in module "<unnamed module>", command "get"',
        id='command without module',
    ),
))
def test_location(context: ErrorContext, location: str | None) -> None:
    """Test location lines of formatted errors."""
    lines = str(ModuleError('Failure', context=context)).splitlines()

    assert lines[0] == 'Failure'

    if location is None:
        assert len(lines) == 1
    else:
        assert lines[1] == location


def test_arguments_error_snippet() -> None:
    """Test that every collected failure is rendered as YAML."""
    error = ArgumentsError(
        'Failed to validate command arguments',
        [
            AssertionFailure(message=[
                SchemaIssue(
                    keyword='required',
                    data_path='$',
                    schema_path='#/required',
                    params={'required': ['url']},
                    message="'url' is a required property",
                ),
            ]),
            AssertionFailure(message='Port is reserved', expected='> 1024', actual=80),
            {'message': 'Raw record', 'actual': object()},
        ],
        module='http',
        command='get',
        schema='args',
    )

    message = str(error)

    assert message.startswith(f'Failed to validate command arguments{linesep}')
    assert '        errors:' in message
    assert "keyword: required" in message
    assert "message: Port is reserved" in message
    assert "expected: '> 1024'" in message
    assert 'message: Raw record' in message
    assert 'actual: <runtime object>' in message
    assert len(error.errors) == 3


def test_arguments_error_keeps_records() -> None:
    """Test that records are kept unmodified on the error."""
    records = [AssertionFailure(message='first'), AssertionFailure(message='second')]

    error = ArgumentsError('Invalid', iter(records))

    assert error.errors == records
    assert error.module is None
    assert error.message == 'Invalid'
