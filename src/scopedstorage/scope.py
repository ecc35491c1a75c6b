"""
Scopes and the mapping from logical keys to physical backing-store keys.

A physical key is `prefix(scope) + namespace + key.lower()`, where the
namespace component only exists for WORKSPACE keys. Lookups are therefore
case-insensitive.
"""
import enum
import re

COMMON_PREFIX = "storage://"
GLOBAL_PREFIX = COMMON_PREFIX + "global/"
WORKSPACE_PREFIX = COMMON_PREFIX + "workspace/"

WORKSPACE_IDENTIFIER = "workspaceIdentifier"
NO_WORKSPACE_NAMESPACE = "__$noWorkspace__"

FILE_SCHEME_ROOT = "file:///"

NAN = float("nan")

_leading_int = re.compile(r"\s*([+-]?[0-9]+)")


class Scope(enum.Enum):
    GLOBAL = "global"
    WORKSPACE = "workspace"

    @classmethod
    def parse(cls, name):
        if isinstance(name, Scope):
            return name
        try:
            return cls(str(name).lower())
        except ValueError:
            raise ValueError(f"Unknown scope: {name!r} (expected 'global' or 'workspace')") from None


def namespace_key(location: str | None) -> str:
    """
    Derives the namespace under which a workspace's keys are stored.

    Local-file locations lose their scheme and end in exactly one slash, anything
    else is used verbatim.
    """
    if not location:
        return NO_WORKSPACE_NAMESPACE
    if location.startswith(FILE_SCHEME_ROOT):
        return location[len(FILE_SCHEME_ROOT):].rstrip("/") + "/"
    return location


def as_key(name: str) -> str:
    return name.lower()


def physical_key(key: str, scope: Scope, workspace_key: str) -> str:
    if scope is Scope.GLOBAL:
        return GLOBAL_PREFIX + as_key(key)
    if scope is Scope.WORKSPACE:
        return WORKSPACE_PREFIX + workspace_key + as_key(key)
    raise ValueError(f"Invalid scope: {scope!r}")


def to_str(value) -> str:
    # matches what a browser store would persist for booleans
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_int(value):
    """Parses a leading base-10 integer, returns NAN when there is none."""
    if isinstance(value, bool):
        return NAN
    if isinstance(value, int):
        return value
    m = _leading_int.match(str(value))
    if not m:
        return NAN
    return int(m.group(1))
