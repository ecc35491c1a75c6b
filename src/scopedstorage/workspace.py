from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Workspace:
    """The currently open project folder, as seen by the storage layer."""

    location: str
    fs_path: str
    uid: int | None = None
    name: str = ""

    @classmethod
    def from_path(cls, path, uid: int | None = None, name: str | None = None) -> "Workspace":
        resolved = Path(os.path.abspath(os.fspath(path)))
        return cls(
            location=resolved.as_uri(),
            fs_path=str(resolved),
            uid=uid,
            name=name if name is not None else resolved.name,
        )

    def has_uid(self) -> bool:
        return isinstance(self.uid, int) and not isinstance(self.uid, bool)
