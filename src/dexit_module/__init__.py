"""Execution core of pluggable test modules.

The `dexit_module` package validates third-party test modules against
a structural contract and drives their commands.

Key features:
- structural contract enforcement for module and command definitions;
- JSON Schema validation of command arguments with all-errors reporting,
  schema defaults, and removal of forbidden properties;
- two-phase command lifecycle: `run` joined with an explicit readiness
  signal, then an optional synchronous `expect`;
- pytest fixtures and a command-line checker for module authors.
"""

from dexit_module.core import ModuleRunner, ReadySignal
from dexit_module.errors import (
    ArgumentsError,
    ContractError,
    MissingExpectError,
    ModuleError,
    ModuleWarning,
    SchemaCompileError,
    UnknownCommandError,
)
from dexit_module.schema import AssertionFailure, Document, RunEnv, SchemaIssue
from dexit_module.settings import RunnerSettings

__all__ = (
    'ArgumentsError',
    'AssertionFailure',
    'ContractError',
    'Document',
    'MissingExpectError',
    'ModuleError',
    'ModuleRunner',
    'ModuleWarning',
    'ReadySignal',
    'RunEnv',
    'RunnerSettings',
    'SchemaCompileError',
    'SchemaIssue',
    'UnknownCommandError',
)
