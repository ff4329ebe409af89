"""Task run environment.

The run environment describes the document and task a command is
executed for. The runner never inspects it: the environment is passed
through to module handlers unchanged.
"""

from pathlib import Path

from pydantic import Field

from dexit_module.models import SchemaModel


class Document(SchemaModel):
    """Identity of the source document of a task."""

    name: str = Field(
        title='Document name',
    )

    filename: str = Field(
        title='Document filename',
    )

    full_path: str = Field(
        alias='fullPath',
        title='Absolute document path',
    )


class RunEnv(SchemaModel):
    """Environment of a single task run."""

    document: Document = Field(
        title='Source document',
    )

    task_path: str = Field(
        alias='taskPath',
        title='Task path',
        description='Location of the task within its document.',
    )

    debug: bool = Field(
        default=False,
        title='Debug flag',
    )

    @classmethod
    def for_path(cls, path: Path, task_path: str, *, debug: bool = False) -> 'RunEnv':
        """Build an environment for a document located on disk.

        Args:
            path: Path to the source document.
            task_path: Location of the task within the document.
            debug: Debug flag forwarded to handlers.

        Returns:
            Run environment describing the document.
        """
        return cls(
            document=Document(
                name=path.stem,
                filename=path.name,
                full_path=f'{path.resolve()}',
            ),
            task_path=task_path,
            debug=debug,
        )
