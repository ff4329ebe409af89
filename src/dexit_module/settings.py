"""Runtime settings of the module runner.

Settings are resolved from environment variables prefixed with `DEXIT_`
(for example `DEXIT_STRICT=1`). Explicit constructor arguments of
`ModuleRunner` take precedence over resolved values.
"""

from pydantic import Field

from dexit_module.models import SettingsModel


class RunnerSettings(SettingsModel):
    """Schema engine and contract enforcement settings."""

    use_defaults: bool = Field(
        default=True,
        title='Apply schema defaults',
        description=(
            'Fill missing object properties with the `default` values '
            'declared by the schema before a handler is invoked.'
        ),
    )

    remove_additional: bool = Field(
        default=True,
        title='Remove additional properties',
        description=(
            'Strip object properties not declared by a schema that sets '
            '`additionalProperties: false` instead of reporting them.'
        ),
    )

    strict: bool = Field(
        default=False,
        title='Strict contract mode',
        description=(
            'Raise contract errors for non-fatal module inconsistencies '
            'instead of emitting warnings.'
        ),
    )
