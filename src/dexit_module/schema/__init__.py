"""Typed representation of modules, commands, and their records.

Defines immutable Pydantic models describing accepted module definitions,
the run environment forwarded to handlers, and the assertion records
exchanged between the runner and module code.
"""

from .assertions import AssertionFailure, SchemaIssue
from .commands import (
    ArgumentsValidator,
    Command,
    ExpectHandler,
    LabelGetter,
    Module,
    ReadyCallback,
    RunHandler,
)
from .environment import Document, RunEnv

__all__ = (
    'ArgumentsValidator',
    'AssertionFailure',
    'Command',
    'Document',
    'ExpectHandler',
    'LabelGetter',
    'Module',
    'ReadyCallback',
    'RunEnv',
    'RunHandler',
    'SchemaIssue',
)
