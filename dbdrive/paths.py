"""Path grammar, name validation and path string algorithms.

The drive namespace is addressed with paths of the form::

    <drive>:\\<schema>\\<TABLE|VIEW>\\<object>[\\<row>]

Every function in this module is pure: classification only looks at the
shape of the string and never checks that anything exists.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .errors import InvalidPathError, NameRejectedError, PathTooDeepError


PATH_SEPARATOR = "\\"
ALTERNATE_SEPARATOR = "/"
DRIVE_SUFFIX = ":"

# Characters allowed in a single path segment (schema, object type, object or row key)
VALIDATION_PATTERN = r"[A-Za-z0-9_]+"

# schema, object type, object name, row key
MAX_SEGMENTS = 4

_NAME_RE = re.compile(VALIDATION_PATTERN)
_DRIVE_RE = re.compile(r"^(?P<drive>[A-Za-z0-9_]+):")


class PathType(str, Enum):
    """Kinds of node a path can denote."""
    ROOT = "Root"
    DATABASE = "Database"
    SCHEMA = "Schema"
    OBJECT_TYPE = "ObjectType"
    OBJECT = "Object"
    ROW = "Row"
    INVALID = "Invalid"


class ObjectType(str, Enum):
    """Categories of relation exposed under a schema."""
    TABLE = "TABLE"
    VIEW = "VIEW"

    @classmethod
    def parse(cls, value: str) -> Optional["ObjectType"]:
        """Case-insensitive lookup; returns None for unknown values."""
        try:
            return cls(value.upper())
        except ValueError:
            return None


def is_valid_name(segment: Optional[str]) -> bool:
    """Check that a segment only holds identifier characters.

    This is the guard for every name that is interpolated into SQL text,
    so it rejects empty strings, separators, whitespace and any SQL
    metacharacter.
    """
    if not isinstance(segment, str) or not segment:
        return False
    return _NAME_RE.fullmatch(segment) is not None


def validate_name(segment: Optional[str], path: Optional[str] = None) -> str:
    """Return the segment unchanged or raise NameRejectedError."""
    if not is_valid_name(segment):
        raise NameRejectedError(segment if segment is not None else "", path=path)
    return segment


@dataclass(frozen=True)
class PathDescriptor:
    """Typed result of classifying a path string."""
    path: Optional[str]
    path_type: PathType
    schema_name: Optional[str] = None
    object_type: Optional[ObjectType] = None
    object_path: Tuple[str, ...] = ()
    rejected_name: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def parse(cls, path: Optional[str]) -> "PathDescriptor":
        return classify(path)

    @property
    def is_valid(self) -> bool:
        return self.path_type != PathType.INVALID

    @property
    def object_name(self) -> Optional[str]:
        return self.object_path[0] if self.object_path else None

    @property
    def row_key(self) -> Optional[str]:
        return self.object_path[1] if len(self.object_path) > 1 else None

    def raise_if_invalid(self) -> "PathDescriptor":
        """Raise the matching error for an Invalid descriptor, else return self."""
        if self.path_type != PathType.INVALID:
            return self
        if self.rejected_name is not None:
            raise NameRejectedError(self.rejected_name, path=self.path)
        raise InvalidPathError(self.path, self.reason)


def _invalid(path: str, reason: str, rejected_name: Optional[str] = None) -> PathDescriptor:
    return PathDescriptor(path, PathType.INVALID, rejected_name=rejected_name, reason=reason)


def classify(path: Optional[str]) -> PathDescriptor:
    """Parse a path string into a PathDescriptor.

    Empty input is the database root. Grammar violations produce an
    Invalid descriptor; a path deeper than schema/type/object/row raises
    PathTooDeepError rather than being truncated.

    Args:
        path: Canonical path (alternate separators must be normalized first)

    Returns:
        PathDescriptor describing the node kind and its name fields
    """
    if not path:
        return PathDescriptor(path, PathType.DATABASE)

    rest = path
    match = _DRIVE_RE.match(rest)
    if match:
        rest = rest[match.end():]
        if rest and not rest.startswith(PATH_SEPARATOR):
            return _invalid(path, "malformed drive prefix")

    if ALTERNATE_SEPARATOR in rest:
        return _invalid(path, "path is not normalized")

    if rest.startswith(PATH_SEPARATOR):
        rest = rest[len(PATH_SEPARATOR):]
        if rest.startswith(PATH_SEPARATOR):
            return _invalid(path, "empty path segment")
    if rest.endswith(PATH_SEPARATOR):
        rest = rest[:-len(PATH_SEPARATOR)]
    if not rest:
        return PathDescriptor(path, PathType.DATABASE)

    segments = rest.split(PATH_SEPARATOR)
    for segment in segments:
        if not segment:
            return _invalid(path, "empty path segment")
        if not is_valid_name(segment):
            return _invalid(path, "name not valid", rejected_name=segment)

    if len(segments) > MAX_SEGMENTS:
        raise PathTooDeepError(path, len(segments))

    schema_name = segments[0]
    if len(segments) == 1:
        return PathDescriptor(path, PathType.SCHEMA, schema_name=schema_name)

    object_type = ObjectType.parse(segments[1])
    if object_type is None:
        return _invalid(path, f"unknown object type '{segments[1]}'")
    if len(segments) == 2:
        return PathDescriptor(path, PathType.OBJECT_TYPE, schema_name=schema_name, object_type=object_type)

    path_type = PathType.OBJECT if len(segments) == 3 else PathType.ROW
    return PathDescriptor(
        path,
        path_type,
        schema_name=schema_name,
        object_type=object_type,
        object_path=tuple(segments[2:]),
    )


def drive_root(drive_name: str) -> str:
    """Build the root path of a drive, e.g. ``db:\\``."""
    return validate_name(drive_name) + DRIVE_SUFFIX + PATH_SEPARATOR


def normalize_path(path: Optional[str]) -> str:
    """Replace alternate separators with the canonical one."""
    if not path:
        return ""
    return path.replace(ALTERNATE_SEPARATOR, PATH_SEPARATOR)


def strip_root(path: str, root: Optional[str]) -> str:
    """Remove a leading drive root from a normalized path."""
    if not root:
        return path
    if path.startswith(root):
        return path[len(root):]
    if path == root.rstrip(PATH_SEPARATOR):
        return ""
    return path


def _is_within(path: str, base: str) -> bool:
    return path == base or path.startswith(base + PATH_SEPARATOR)


def make_path(parent: Optional[str], child: Optional[str]) -> str:
    """Join two path parts with exactly one separator between them."""
    normal_parent = normalize_path(parent).rstrip(PATH_SEPARATOR)
    normal_child = normalize_path(child).lstrip(PATH_SEPARATOR)

    if not normal_parent:
        return normal_child
    if not normal_child:
        return normal_parent + PATH_SEPARATOR
    return normal_parent + PATH_SEPARATOR + normal_child


def get_parent_path(path: Optional[str], root: Optional[str] = None, drive: str = "") -> str:
    """Return the parent portion of a path.

    The drive root is the floor: the parent of a top-level segment is the
    drive root and the drive root itself has no parent (empty string).
    When ``root`` is given, a path outside of it (or equal to it) yields
    ``root``.
    """
    normal = normalize_path(path)
    carries_drive = bool(drive) and (normal.startswith(drive) or normal == drive.rstrip(PATH_SEPARATOR))
    relative = strip_root(normal, drive).strip(PATH_SEPARATOR)
    if not relative:
        return ""

    if root:
        normal_root = strip_root(normalize_path(root), drive).strip(PATH_SEPARATOR)
        if normal_root and (relative == normal_root or not _is_within(relative, normal_root)):
            return root

    if PATH_SEPARATOR not in relative:
        return drive

    parent = relative[:relative.rindex(PATH_SEPARATOR)]
    return drive + parent if carries_drive else parent


def normalize_relative_path(path: Optional[str], base_path: Optional[str], drive: str = "") -> str:
    """Express ``path`` relative to ``base_path``.

    Raises:
        InvalidPathError: if ``path`` is not located under ``base_path``
    """
    normal = strip_root(normalize_path(path), drive).strip(PATH_SEPARATOR)
    normal_base = strip_root(normalize_path(base_path), drive).strip(PATH_SEPARATOR)

    if not normal_base:
        return normal
    if normal == normal_base:
        return ""
    if not _is_within(normal, normal_base):
        raise InvalidPathError(path, reason=f"not located under {base_path}")
    return normal[len(normal_base) + len(PATH_SEPARATOR):]


def get_child_name(path: Optional[str], drive: str = "") -> str:
    """Return the leaf segment of a path (empty for the drive root)."""
    relative = strip_root(normalize_path(path), drive).strip(PATH_SEPARATOR)
    if PATH_SEPARATOR not in relative:
        return relative
    return relative[relative.rindex(PATH_SEPARATOR) + len(PATH_SEPARATOR):]
