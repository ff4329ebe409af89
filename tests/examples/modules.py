"""Example module definitions.

This module demonstrates both supported ways of declaring a test module:
- `echo` is a plain mapping using the camelCase field spelling;
- this Python module itself is a module definition, declared with
  module-level attributes in snake_case.

`broken` violates the contract and is used to test error reporting.
"""

from typing import TYPE_CHECKING, Any

from dexit_module.schema import AssertionFailure

if TYPE_CHECKING:
    from collections.abc import Callable


async def echo_run(args: dict[str, Any], on_ready: 'Callable[[], None]',
                   env: Any) -> dict[str, Any]:  # noqa: ANN401
    """Return arguments as the result."""
    on_ready()
    return {'message': args['message']}


def echo_expect(args: dict[str, Any], result: dict[str, Any],
                env: Any) -> list[AssertionFailure]:  # noqa: ANN401
    """Compare the echoed message."""
    if result['message'] == args['message']:
        return []

    return [AssertionFailure(
        message='Echoed message differs',
        expected=args['message'],
        actual=result['message'],
    )]


MESSAGE_SCHEMA = {
    'type': 'object',
    'required': ['message'],
    'properties': {
        'message': {
            'type': 'string',
        },
    },
}

echo = {
    'name': 'echo',
    'description': 'Echoes messages back',
    'defaultsSchema': {'type': 'object'},
    'commands': {
        'say': {
            'description': 'Echo a message',
            'argsSchema': MESSAGE_SCHEMA,
            'expectSchema': MESSAGE_SCHEMA,
            'run': echo_run,
            'expect': echo_expect,
            'getLabel': lambda run_args, expect_args: f'say {run_args["message"]!r}',
        },
        'ping': {
            'description': 'Do nothing',
            'argsSchema': {},
            'run': echo_run,
            'expectSchema': MESSAGE_SCHEMA,
        },
    },
}

broken = {
    'name': 'broken',
    'description': 'Module without commands',
    'defaultsSchema': {},
}

name = 'examples'
description = 'Module declared with module-level attributes'
defaults_schema = {'type': 'object'}
commands = {
    'say': {
        'description': 'Echo a message',
        'args_schema': MESSAGE_SCHEMA,
        'run': echo_run,
    },
}
