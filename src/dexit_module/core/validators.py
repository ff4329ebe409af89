"""Schema engine strategy and its JSON Schema implementation.

The runner treats the schema engine as an injected capability: a compiler
turns a schema document into a validator, and a validator checks data
returning every issue found in one pass.

Validators may mutate the validated data in place:
- missing object properties are filled with schema `default` values,
  except inside `anyOf`, `oneOf` and `not` branches;
- properties forbidden by `additionalProperties: false` are removed
  instead of being reported.

The default implementation is backed by the `jsonschema` library.
"""

from collections.abc import Mapping
from contextvars import ContextVar
from copy import deepcopy
from functools import cache
from re import search
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias

from jsonschema import Draft202012Validator
from jsonschema.validators import extend, validator_for

from dexit_module.schema import SchemaIssue

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

if TYPE_CHECKING:
    from jsonschema import ValidationError
    from jsonschema.protocols import Validator

if TYPE_CHECKING:
    from dexit_module.values import JSONSchema, RuntimeValue

    KeywordHandler: TypeAlias = Callable[..., Iterator[ValidationError]]


class SchemaValidator(Protocol):
    """Compiled schema validator."""

    def validate(self, data: 'RuntimeValue') -> tuple[SchemaIssue, ...]:
        """Validate data, possibly normalizing it in place.

        Args:
            data: Data to validate.

        Returns:
            All issues found; an empty tuple means the data is valid.
        """
        ...  # pragma: no cover


class SchemaCompiler(Protocol):
    """Factory of schema validators."""

    def compile(self, schema: 'JSONSchema') -> SchemaValidator:
        """Compile a schema document.

        Args:
            schema: Schema document.

        Returns:
            Validator bound to the schema.

        Raises:
            Exception: If the schema itself is not valid.
        """
        ...  # pragma: no cover


#: Keywords whose branches may fail without failing the schema.
COMPOSITE_KEYWORDS = ('anyOf', 'oneOf', 'not')

#: Cleared while composite branches are evaluated.
_defaults_enabled: ContextVar[bool] = ContextVar('_defaults_enabled', default=True)


def _apply_defaults(instance: 'RuntimeValue', schema: Mapping[str, Any]) -> None:
    """Fill missing object properties with declared default values."""
    if not _defaults_enabled.get():
        return

    properties = schema.get('properties')
    if not isinstance(instance, dict) or not isinstance(properties, Mapping):
        return

    for name, subschema in properties.items():
        if isinstance(subschema, Mapping) and 'default' in subschema:
            instance.setdefault(name, deepcopy(subschema['default']))


def _find_additional(instance: dict[str, Any], schema: Mapping[str, Any]) -> list[str]:
    """Return names of properties not declared by an object schema."""
    properties = schema.get('properties', {})
    patterns = schema.get('patternProperties', {})

    return [
        name for name in instance
        if name not in properties and not any(
            search(pattern, name)
            for pattern in patterns
        )
    ]


def _without_defaults(handler: 'KeywordHandler') -> 'KeywordHandler':
    """Wrap a keyword handler to evaluate its branches without defaults.

    Branches are evaluated eagerly, so no generator is suspended while
    defaulting is disabled.
    """
    def composite(validator: 'Validator', value: Any,  # noqa: ANN401
                  instance: Any, schema: Mapping[str, Any]) -> 'Iterator[ValidationError]':  # noqa: ANN401
        token = _defaults_enabled.set(False)
        try:
            errors = list(handler(validator, value, instance, schema))
        finally:
            _defaults_enabled.reset(token)

        yield from errors

    return composite


@cache
def _extend_validator(base: type['Validator'], *,
                      use_defaults: bool = True,
                      remove_additional: bool = True) -> type['Validator']:
    """Extend a validator class with normalizing keyword handlers.

    Args:
        base: Validator class matching the schema dialect.
        use_defaults: Fill missing properties with default values.
        remove_additional: Remove properties forbidden by the schema.

    Returns:
        Extended validator class.
    """
    keywords = {}

    if use_defaults:
        validate_properties = base.VALIDATORS['properties']
        validate_required = base.VALIDATORS.get('required')

        def properties(validator: 'Validator', value: Any,  # noqa: ANN401
                       instance: Any, schema: Mapping[str, Any]) -> 'Iterator[ValidationError]':  # noqa: ANN401
            _apply_defaults(instance, schema)
            yield from validate_properties(validator, value, instance, schema)

        def required(validator: 'Validator', value: Any,  # noqa: ANN401
                     instance: Any, schema: Mapping[str, Any]) -> 'Iterator[ValidationError]':  # noqa: ANN401
            _apply_defaults(instance, schema)
            yield from validate_required(validator, value, instance, schema)

        keywords['properties'] = properties
        if validate_required is not None:
            keywords['required'] = required

        for keyword in COMPOSITE_KEYWORDS:
            if (validate_composite := base.VALIDATORS.get(keyword)) is not None:
                keywords[keyword] = _without_defaults(validate_composite)

    if remove_additional:
        validate_additional = base.VALIDATORS['additionalProperties']

        def additional(validator: 'Validator', value: Any,  # noqa: ANN401
                       instance: Any, schema: Mapping[str, Any]) -> 'Iterator[ValidationError]':  # noqa: ANN401
            if value is False and isinstance(instance, dict):
                for name in _find_additional(instance, schema):
                    del instance[name]
                return
            yield from validate_additional(validator, value, instance, schema)

        keywords.update(additionalProperties=additional)

    if not keywords:
        return base

    return extend(base, keywords)


def make_issue(error: 'ValidationError') -> SchemaIssue:
    """Convert a `jsonschema` error into a schema issue record.

    Args:
        error: Error reported by a `jsonschema` validator.

    Returns:
        Schema issue record.
    """
    keyword = 'false'
    if error.validator is not None:
        keyword = f'{error.validator}'

    # Only `propertyNames` validates keys; its errors carry the key as instance.
    property_name = None
    if 'propertyNames' in error.relative_schema_path and isinstance(error.instance, str):
        property_name = error.instance

    return SchemaIssue(
        keyword=keyword,
        data_path=error.json_path,
        schema_path='/'.join(('#', *(f'{item}' for item in error.schema_path))),
        params={keyword: error.validator_value},
        message=error.message,
        property_name=property_name,
        schema=error.validator_value,
        parent_schema=error.schema,
        data=error.instance,
    )


class JSONSchemaValidator:
    """Validator bound to a single compiled JSON schema.

    The validator holds no per-call state and may be shared by
    concurrent calls.
    """

    def __init__(self, validator: 'Validator') -> None:
        """Initialize a validator.

        Args:
            validator: `jsonschema` validator instance.
        """
        self.validator = validator

    def validate(self, data: 'RuntimeValue') -> tuple[SchemaIssue, ...]:
        """Validate data collecting all issues.

        Args:
            data: Data to validate; normalized in place.

        Returns:
            All issues found, ordered by their location in the data.
        """
        errors = list(self.validator.iter_errors(data))

        return tuple(
            make_issue(error)
            for error in sorted(errors, key=lambda item: f'{item.json_path}')
        )


class JSONSchemaCompiler:
    """Schema compiler backed by the `jsonschema` library.

    The schema dialect is selected from the `$schema` keyword, falling
    back to Draft 2020-12.
    """

    def __init__(self, *, use_defaults: bool = True,
                 remove_additional: bool = True) -> None:
        """Initialize a compiler.

        Args:
            use_defaults: Fill missing properties with default values.
            remove_additional: Remove properties forbidden by the schema.
        """
        self.use_defaults = use_defaults
        self.remove_additional = remove_additional

    def compile(self, schema: 'JSONSchema') -> JSONSchemaValidator:
        """Compile a schema document.

        Args:
            schema: Schema document.

        Returns:
            Validator bound to the schema.

        Raises:
            SchemaError: If the schema is not valid for its dialect.
        """
        base = validator_for(schema, default=Draft202012Validator)
        base.check_schema(schema)

        validator_class = _extend_validator(
            base,
            use_defaults=self.use_defaults,
            remove_additional=self.remove_additional,
        )

        return JSONSchemaValidator(validator_class(schema))
