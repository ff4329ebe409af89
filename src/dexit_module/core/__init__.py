"""Core contract validation and command dispatch.

This module defines the execution core of the module contract.

It provides:
- structural contract enforcement for third-party module definitions;
- a pluggable schema engine compiling per-command validators;
- the command runner driving the `run` and `expect` lifecycle;
- the readiness signal joined with handler completion.

The primary public entry point is `ModuleRunner`.
"""

from .contract import ContractValidator
from .ready import ReadySignal
from .runner import ModuleRunner
from .validators import JSONSchemaCompiler, JSONSchemaValidator, SchemaCompiler, SchemaValidator

__all__ = (
    'ContractValidator',
    'JSONSchemaCompiler',
    'JSONSchemaValidator',
    'ModuleRunner',
    'ReadySignal',
    'SchemaCompiler',
    'SchemaValidator',
)
