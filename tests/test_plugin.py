"""Tests for the pytest fixtures."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from dexit_module.core import ModuleRunner
from dexit_module.errors import ContractError, ModuleWarning
from dexit_module.schema import RunEnv
from tests.examples.modules import echo

if TYPE_CHECKING:
    from collections.abc import Callable


def test_run_env(run_env: RunEnv) -> None:
    """Test the environment describes the current test."""
    assert run_env.document.name == 'test_plugin'
    assert run_env.document.filename == 'test_plugin.py'
    assert run_env.document.full_path == f'{Path(__file__).resolve()}'
    assert run_env.task_path == 'test_run_env'


def test_module_runner_is_strict(module_runner: 'Callable[..., ModuleRunner]') -> None:
    """Test runners built by the fixture are strict by default."""
    with pytest.raises(ContractError, match=r"'ping' declares 'expect_schema'"):
        module_runner(echo)


def test_module_runner_relaxed(module_runner: 'Callable[..., ModuleRunner]') -> None:
    """Test runners built by the fixture may be relaxed."""
    with pytest.warns(ModuleWarning):
        runner = module_runner(echo, strict=False)

    assert isinstance(runner, ModuleRunner)
    assert runner.name == 'echo'


@pytest.mark.asyncio
async def test_module_runner_lifecycle(module_runner: 'Callable[..., ModuleRunner]',
                                       run_env: RunEnv) -> None:
    """Test a full command lifecycle through the fixtures."""
    with pytest.warns(ModuleWarning):
        runner = module_runner(echo, strict=False)

    result = await runner.run('say', {'message': 'hello'}, run_env)

    assert result == {'message': 'hello'}
    assert runner.expect('say', {'message': 'hello'}, result, run_env) == []
    assert runner.get_label('say', {'message': 'hello'}, None) == "say 'hello'"
