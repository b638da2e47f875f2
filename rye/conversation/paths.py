"""
Where conversation documents live on disk.

The directory is resolved once at startup and handed to the store, so the
store itself never looks at the environment.
"""

from pathlib import Path
from typing import Optional, Union

from rye.exceptions import StorageError

CONVERSATIONS_ENV = "RYE_CONVERSATIONS"
DEFAULT_DIRNAME = ".rye"


def resolve_conversations_dir(
    override: Optional[Union[str, Path]] = None,
    home: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Return the conversations directory.

    ``override`` wins if it already exists or its parent does. Otherwise
    the directory is ``~/.rye``.

    Raises:
        StorageError: no usable override and no home directory
    """
    if override:
        path = Path(override).expanduser()
        if path.exists() or path.parent.exists():
            return path

    if home is None:
        try:
            home = Path.home()
        except (RuntimeError, KeyError) as err:
            raise StorageError(f"Could not find home directory: {err}") from err

    return Path(home) / DEFAULT_DIRNAME
