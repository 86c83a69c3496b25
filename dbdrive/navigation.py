"""Navigation engine: resolve drive paths against a catalog driver.

Every operation is a pure function of ``(path, driver)``: the path is
normalized, stripped of the drive root and classified, then dispatched on
its PathType. Nothing is cached between calls.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional

from .database.base import CatalogDriver
from .errors import BackendError, DriveError, InvalidPathError, NameRejectedError, NotFoundError
from .paths import (
    ALTERNATE_SEPARATOR,
    PATH_SEPARATOR,
    ObjectType,
    PathDescriptor,
    PathType,
    classify,
    drive_root,
    get_child_name,
    get_parent_path,
    is_valid_name,
    make_path,
    normalize_path,
    normalize_relative_path,
    strip_root,
)

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str, DriveError], None]


@dataclass(frozen=True)
class DriveInfo:
    """The drive root item."""
    name: str
    root: str
    provider: str

    def to_dict(self):
        return {"name": self.name, "root": self.root, "provider": self.provider}


@dataclass
class ChildItem:
    """One child produced by a listing: its full path, the item and whether it is a container."""
    path: str
    item: Any
    is_container: bool


class DatabaseNavigator:
    """Resolves ``<drive>:\\schema\\TYPE\\object\\row`` paths through a CatalogDriver."""

    def __init__(self, driver: CatalogDriver, drive_name: str = "db", max_read_result: Optional[int] = None):
        """Bind a navigator to a driver and a drive root.

        Args:
            driver: Catalog driver for the configured backend
            drive_name: Drive name, the root becomes ``<drive_name>:\\``
            max_read_result: Row cap for object listings (default: the driver's)

        Raises:
            InvalidPathError: if the drive root would be a bare separator
            NameRejectedError: if the drive name holds invalid characters
        """
        if drive_name is None or drive_name.strip() in ("", PATH_SEPARATOR, ALTERNATE_SEPARATOR):
            raise InvalidPathError(drive_name, reason="drive root cannot be the path separator")
        self.driver = driver
        self.drive_name = drive_name
        self.root = drive_root(drive_name)
        self.max_read_result = max_read_result

    @property
    def drive(self) -> DriveInfo:
        return DriveInfo(name=self.drive_name, root=self.root, provider=self.driver.PROVIDER)

    def _describe(self, path: Optional[str]) -> PathDescriptor:
        return classify(strip_root(normalize_path(path), self.root))

    def _resolve(self, path: Optional[str]) -> PathDescriptor:
        return self._describe(path).raise_if_invalid()

    def _full_path(self, *segments: str) -> str:
        result = self.root
        for segment in segments:
            result = make_path(result, segment)
        return result

    # Items

    def get_item(self, path: Optional[str]) -> Any:
        """Return the item a path denotes.

        Database yields the DriveInfo, ObjectType the ObjectType itself,
        Schema and Object their metadata; Row paths resolve to None.

        Raises:
            InvalidPathError: if the path cannot be classified
            NotFoundError: if the schema, table or view does not exist
        """
        logger.debug("get_item: <- path=%s", path)
        descriptor = self._resolve(path)
        path_type = descriptor.path_type

        if path_type == PathType.DATABASE:
            logger.debug("get_item: -> Database")
            return self.drive

        if path_type == PathType.SCHEMA:
            schema = self.driver.get_schema(descriptor.schema_name)
            if schema is None:
                raise NotFoundError(path)
            logger.debug("get_item: -> Schema")
            return schema

        if path_type == PathType.OBJECT_TYPE:
            logger.debug("get_item: -> ObjectType")
            return descriptor.object_type

        if path_type == PathType.OBJECT:
            if descriptor.object_type == ObjectType.TABLE:
                item = self.driver.get_table(descriptor.schema_name, descriptor.object_name)
            else:
                item = self.driver.get_view(descriptor.schema_name, descriptor.object_name)
            if item is None:
                raise NotFoundError(path)
            logger.debug("get_item: -> Object - %s", descriptor.object_type.value)
            return item

        logger.debug("get_item: -> Row")
        return None

    def item_exists(self, path: Optional[str]) -> bool:
        """Check whether the item at a path exists; Invalid and Row paths report False."""
        logger.debug("item_exists: <- path=%s", path)
        descriptor = self._describe(path)
        path_type = descriptor.path_type

        if path_type == PathType.DATABASE:
            result = True
        elif path_type == PathType.SCHEMA:
            result = self.driver.schema_exists(descriptor.schema_name)
        elif path_type == PathType.OBJECT_TYPE:
            result = (
                self.driver.schema_exists(descriptor.schema_name)
                and descriptor.object_type in self.driver.supported_object_types(descriptor.schema_name)
            )
        elif path_type == PathType.OBJECT:
            result = self.driver.object_exists(
                descriptor.schema_name, descriptor.object_type, descriptor.object_path
            )
        else:
            result = False

        logger.debug("item_exists: %s -> %s", path_type.value, result)
        return result

    def is_valid_path(self, path: Optional[str]) -> bool:
        """Syntactic check only; nothing is looked up."""
        if not path:
            return False
        try:
            return self._describe(path).is_valid
        except InvalidPathError:
            return False

    def is_item_container(self, path: Optional[str]) -> bool:
        """Every node except a Row can hold children."""
        descriptor = self._describe(path)
        result = descriptor.path_type != PathType.ROW
        logger.debug("is_item_container: %s -> %s", path, result)
        return result

    def has_child_items(self, path: Optional[str]) -> bool:
        descriptor = self._describe(path)
        return descriptor.path_type in (
            PathType.ROOT,
            PathType.DATABASE,
            PathType.SCHEMA,
            PathType.OBJECT_TYPE,
            PathType.OBJECT,
        )

    # Children

    def get_child_items(
        self,
        path: Optional[str],
        recurse: bool = False,
        on_error: Optional[ErrorCallback] = None,
    ) -> Iterator[ChildItem]:
        """Stream the children of a path, optionally the whole subtree.

        A catalog name that fails name validation is never turned into a
        child path: the child is skipped, logged and reported to
        ``on_error(parent_path, error)``. When recursing, a BackendError
        inside one child's subtree is handled the same way and the
        traversal continues with the next sibling. Errors listing ``path``
        itself propagate.

        Args:
            path: Parent path
            recurse: Also list every descendant, depth first
            on_error: Called for each child or subtree skipped

        Returns:
            Iterator of ChildItem
        """
        logger.debug("get_child_items: <- path=%s recurse=%s", path, recurse)
        descriptor = self._resolve(path)
        return self._children(descriptor, recurse, on_error)

    def _children(
        self,
        descriptor: PathDescriptor,
        recurse: bool,
        on_error: Optional[ErrorCallback],
    ) -> Iterator[ChildItem]:
        path_type = descriptor.path_type
        schema_name = descriptor.schema_name

        if path_type == PathType.DATABASE:
            for schema in self.driver.list_schemas():
                if not self._accept_name(self.root, schema.schema_name, on_error):
                    continue
                child_path = self._full_path(schema.schema_name)
                yield ChildItem(child_path, schema, True)
                if recurse:
                    yield from self._subtree(child_path, on_error)

        elif path_type == PathType.SCHEMA:
            for object_type in self.driver.supported_object_types(schema_name):
                child_path = self._full_path(schema_name, object_type.value)
                yield ChildItem(child_path, object_type, True)
                if recurse:
                    yield from self._subtree(child_path, on_error)

        elif path_type == PathType.OBJECT_TYPE:
            parent_path = self._full_path(schema_name, descriptor.object_type.value)
            if descriptor.object_type == ObjectType.TABLE:
                objects = self.driver.list_tables(schema_name)
            else:
                objects = self.driver.list_views(schema_name)
            for item in objects:
                if not self._accept_name(parent_path, item.name, on_error):
                    continue
                child_path = make_path(parent_path, item.name)
                yield ChildItem(child_path, item, True)
                if recurse:
                    yield from self._subtree(child_path, on_error)

        elif path_type == PathType.OBJECT:
            object_path = self._full_path(schema_name, descriptor.object_type.value, descriptor.object_name)
            rows = self.driver.stream_rows(schema_name, descriptor.object_name, max_result=self.max_read_result)
            for row in rows:
                yield ChildItem(object_path, row, False)

    def _accept_name(self, parent_path: str, name: str, on_error: Optional[ErrorCallback]) -> bool:
        """Catalog names go into child paths only once they pass name validation."""
        if is_valid_name(name):
            return True
        error = NameRejectedError(name, path=parent_path)
        logger.warning("get_child_items: skipped %r under %s: %s", name, parent_path, error.message)
        if on_error is not None:
            on_error(parent_path, error)
        return False

    def _subtree(self, path: str, on_error: Optional[ErrorCallback]) -> Iterator[ChildItem]:
        try:
            yield from self._children(self._resolve(path), True, on_error)
        except BackendError as e:
            logger.warning("get_child_items: skipped %s: %s", path, e)
            if on_error is not None:
                on_error(path, e)

    def get_child_names(self, path: Optional[str]) -> Iterator[str]:
        """Stream the names of the direct children of a path.

        Database lists schema names, Schema its object types, ObjectType
        the table or view names. Rows are not named items.
        """
        logger.debug("get_child_names: <- path=%s", path)
        descriptor = self._resolve(path)
        path_type = descriptor.path_type

        if path_type == PathType.DATABASE:
            return self.driver.list_schema_names()
        if path_type == PathType.SCHEMA:
            return iter([t.value for t in self.driver.supported_object_types(descriptor.schema_name)])
        if path_type == PathType.OBJECT_TYPE:
            if descriptor.object_type == ObjectType.TABLE:
                return self.driver.list_table_names(descriptor.schema_name)
            return self.driver.list_view_names(descriptor.schema_name)
        return iter(())

    # Path algorithms

    def make_path(self, parent: Optional[str], child: Optional[str]) -> str:
        return make_path(parent, child)

    def get_parent_path(self, path: Optional[str], root: Optional[str] = None) -> str:
        return get_parent_path(path, root=root, drive=self.root)

    def normalize_relative_path(self, path: Optional[str], base_path: Optional[str]) -> str:
        return normalize_relative_path(path, base_path, drive=self.root)

    def get_child_name(self, path: Optional[str]) -> str:
        return get_child_name(path, drive=self.root)

    def is_valid_name(self, name: Optional[str]) -> bool:
        return is_valid_name(name)
