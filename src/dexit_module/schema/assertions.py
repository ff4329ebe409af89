"""Assertion records.

Assertion records describe single expectation violations. They are
produced by schema validation, by supplementary argument validators,
and by module expect handlers.
"""

from typing import Any

from pydantic import Field

from dexit_module.models import RecordModel


class SchemaIssue(RecordModel):
    """Single error record reported by the schema engine."""

    keyword: str = Field(
        title='Failing keyword',
        description='Schema keyword whose rule was violated (e.g. `required`).',
    )

    data_path: str = Field(
        default='$',
        title='Data path',
        description='JSON path of the offending value within the validated data.',
    )

    schema_path: str = Field(
        default='#',
        title='Schema path',
        description='JSON pointer of the failing keyword within the schema.',
    )

    params: dict[str, Any] = Field(
        default_factory=dict,
        title='Keyword parameters',
        description='Value of the failing keyword, keyed by the keyword name.',
    )

    message: str | None = Field(
        default=None,
        title='Message',
        description='Human-readable description of the violation.',
    )

    property_name: str | None = Field(
        default=None,
        title='Property name',
        description='Offending property name rejected by `propertyNames`.',
    )

    schema_: Any = Field(
        default=None,
        alias='schema',
        title='Keyword schema',
        description='Value of the failing keyword in the schema.',
    )

    parent_schema: Any = Field(
        default=None,
        title='Parent schema',
        description='Schema object containing the failing keyword.',
    )

    data: Any = Field(
        default=None,
        title='Data',
        description='Offending value.',
    )


class AssertionFailure(RecordModel):
    """Structured description of one expectation violation.

    The message is either a human-readable string or the list of
    schema engine records explaining why validation failed.
    """

    message: str | list[SchemaIssue] = Field(
        title='Message',
        description='Failure description or schema engine records.',
    )

    expected: Any = Field(
        default=None,
        title='Expected value',
    )

    actual: Any = Field(
        default=None,
        title='Actual value',
    )
