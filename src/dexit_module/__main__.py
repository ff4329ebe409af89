"""CLI utilities for module authors.

The `check` command imports a module definition, enforces its contract,
compiles its schemas, and prints the commands it exposes.
"""

from importlib import import_module

from click import ClickException, argument, echo, group, option

from dexit_module.core import ModuleRunner
from dexit_module.errors import ModuleError
from dexit_module.values import RuntimeValue  # noqa: TC001


def load_definition(reference: str) -> RuntimeValue:
    """Import a module definition by reference.

    The reference is either a dotted module path (the Python module
    itself is the definition) or `package.module:attribute`.

    Args:
        reference: Definition reference.

    Returns:
        Imported definition object.

    Raises:
        ClickException: If the reference can not be imported.
    """
    module_name, _, attribute = reference.partition(':')

    try:
        definition = import_module(module_name)
        for name in filter(None, attribute.split('.')):
            definition = getattr(definition, name)

    except (ImportError, AttributeError) as base:
        raise ClickException(f'Can not import {reference!r}: {base}') from base

    return definition


@group(help='Command-line utilities for test module authors.')
def cli() -> None:
    """Root CLI group."""
    return None


@cli.command(
    name='check',
    help=(
        'Validate a module definition against the module contract and '
        'print its commands. MODULE is `package.module` or '
        '`package.module:attribute`.'
    ),
)
@option(
    '--strict',
    is_flag=True,
    default=False,
    help='Treat non-fatal contract issues as errors (defaults to DEXIT_STRICT).',
)
@argument('module')
def check_module(module: str, *, strict: bool) -> None:
    """Check a module definition.

    Args:
        module: Definition reference.
        strict: Treat non-fatal contract issues as errors.
    """
    definition = load_definition(module)

    try:
        runner = ModuleRunner(definition, strict=strict or None)

    except ModuleError as base:
        raise ClickException(f'{base}') from base

    echo(f'{runner.name}: {runner.module.description}')
    for name, command in runner.commands.items():
        marker = ' [expect]' if command.expect is not None else ''
        echo(f'  {name}{marker}: {command.description}')


if __name__ == '__main__':
    cli()
