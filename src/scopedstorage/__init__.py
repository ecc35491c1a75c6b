from importlib import metadata as _metadata


def _load_version() -> str:
    """Return the package version from installed metadata."""
    try:
        return _metadata.version("scopedstorage")
    except _metadata.PackageNotFoundError:
        return "0.0.0"


__version__ = _load_version()

from .backing import FlatKeyValueStore, InMemoryStore, JsonFileStore  # noqa: E402
from .config import Environment  # noqa: E402
from .scope import Scope  # noqa: E402
from .storage import ScopedStorage  # noqa: E402
from .workspace import Workspace  # noqa: E402
