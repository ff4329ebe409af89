"""Test suite for the dexit-module-base package.

This package contains unit and integration tests validating the module
contract, the JSON Schema engine, the command lifecycle, and the
command-line and pytest integrations.
"""
