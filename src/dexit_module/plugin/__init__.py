"""Pytest fixtures for module authors.

This plugin is registered through the `pytest11` entry point and
provides fixtures to exercise a module definition from a regular
pytest suite:
- `run_env`, a run environment describing the current test;
- `module_runner`, a factory of strict module runners.
"""

from typing import TYPE_CHECKING

import pytest

from dexit_module.core import ModuleRunner
from dexit_module.schema import RunEnv

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from dexit_module.values import RuntimeValue


@pytest.fixture
def run_env(request: pytest.FixtureRequest) -> RunEnv:
    """Provide a run environment for the current test.

    The document is the test file and the task path is the test node
    name. The debug flag follows the pytest verbosity.

    Returns:
        Run environment forwarded to module handlers.
    """
    return RunEnv.for_path(
        request.node.path,
        request.node.name,
        debug=request.config.get_verbosity() > 1,
    )


@pytest.fixture
def module_runner() -> 'Callable[..., ModuleRunner]':
    """Provide a factory of module runners.

    Runners are strict by default, so non-fatal contract issues fail
    the test instead of emitting warnings.
    """
    def build(definition: 'RuntimeValue', *, strict: bool = True) -> ModuleRunner:
        """Build a runner for a module definition.

        Args:
            definition: Module definition.
            strict: Treat non-fatal contract issues as errors.

        Returns:
            Module runner.
        """
        return ModuleRunner(definition, strict=strict)

    return build
