"""
Hierarchical, file-backed preference store.

Every node is a directory; its key/value entries live in a prefs.json file
inside it and its children are subdirectories named after the URL-quoted
child name. The store has two roots: the system root under the runtime home
and the user root under the user's home directory (see testenv.paths).

Changes made with put/remove/clear stay in memory until flush(). Removing a
node deletes its directory immediately.
"""

import os
import json
import shutil
import logging
import tempfile
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote, unquote

from testenv.hooks.base import PreferenceNodeLike
from testenv.paths import get_system_prefs_dir, get_user_prefs_dir

logger = logging.getLogger(__name__)

PREFS_FILE = "prefs.json"
MAX_KEY_LENGTH = 80
MAX_NAME_LENGTH = 80
MAX_VALUE_LENGTH = 8 * 1024


class BackingStoreError(Exception):
    """The persisted store could not be read, written or deleted."""
    pass


class NodeRemovedError(RuntimeError):
    pass


def _validate_key(key: str) -> None:
    if not isinstance(key, str):
        raise TypeError(f"Preference key must be a string, got {type(key).__name__}")
    if len(key) > MAX_KEY_LENGTH:
        raise ValueError(f"Key too long ({len(key)} > {MAX_KEY_LENGTH}): {key[:20]}...")


def _validate_name(name: str) -> None:
    if not name or name in (".", ".."):
        raise ValueError(f"Invalid node name: '{name}'")
    if "/" in name:
        raise ValueError(f"Node name may not contain '/': {name}")
    if len(name) > MAX_NAME_LENGTH:
        raise ValueError(f"Node name too long ({len(name)} > {MAX_NAME_LENGTH}): {name[:20]}...")


def _read_entries(prefs_file: Path) -> Dict[str, str]:
    try:
        with open(prefs_file, "r", encoding="utf-8") as f:
            raw = f.read()
    except FileNotFoundError:
        return {}
    except OSError as e:
        raise BackingStoreError(f"Cannot read {prefs_file}: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(f"Invalid preferences format in {prefs_file}; ignoring its contents")
        return {}

    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        logger.warning(f"Unexpected preferences layout in {prefs_file}; ignoring its contents")
        return {}
    return data


def _write_entries(directory: Path, entries: Dict[str, str]) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=".prefs-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(entries, f, indent=2, sort_keys=True)
            os.replace(tmp_name, directory / PREFS_FILE)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except OSError as e:
        raise BackingStoreError(f"Cannot write preferences to {directory}: {e}") from e


def _delete(path: Path) -> None:
    try:
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.exists():
            shutil.rmtree(path)
    except OSError as e:
        raise BackingStoreError(f"Cannot remove {path}: {e}") from e


class PreferenceNode(PreferenceNodeLike):
    def __init__(self, parent: Optional["PreferenceNode"], name: str, directory: Path):
        self.parent = parent
        self.name = name
        self.directory = directory
        self._entries: Optional[Dict[str, str]] = None
        self._dirty = False
        self._removed = False
        self._children: Dict[str, "PreferenceNode"] = {}

    def __repr__(self) -> str:
        return f"PreferenceNode({self.absolute_path!r}, {str(self.directory)!r})"

    @property
    def absolute_path(self) -> str:
        if self.parent is None:
            return "/"
        parent_path = self.parent.absolute_path
        if parent_path == "/":
            return f"/{self.name}"
        return f"{parent_path}/{self.name}"

    @property
    def removed(self) -> bool:
        return self._removed

    def _check(self) -> None:
        if self._removed:
            raise NodeRemovedError(f"Node {self.absolute_path} has been removed")

    def _load(self) -> Dict[str, str]:
        if self._entries is None:
            self._entries = _read_entries(self.directory / PREFS_FILE)
        return self._entries

    def _root(self) -> "PreferenceNode":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    def _child(self, name: str) -> "PreferenceNode":
        child = self._children.get(name)
        if child is None:
            _validate_name(name)
            child = PreferenceNode(self, name, self.directory / quote(name, safe=""))
            self._children[name] = child
        return child

    # Entries

    def keys(self) -> List[str]:
        self._check()
        return sorted(self._load())

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        self._check()
        _validate_key(key)
        return self._load().get(key, default)

    def put(self, key: str, value: str) -> None:
        self._check()
        _validate_key(key)
        if not isinstance(value, str):
            raise TypeError(f"Preference value must be a string, got {type(value).__name__}")
        if len(value) > MAX_VALUE_LENGTH:
            raise ValueError(f"Value too long ({len(value)} > {MAX_VALUE_LENGTH}) for key {key}")
        self._load()[key] = value
        self._dirty = True

    def remove(self, key: str) -> None:
        self._check()
        _validate_key(key)
        if self._load().pop(key, None) is not None:
            self._dirty = True

    def clear(self) -> None:
        """Drop every entry of this node (children are untouched)."""
        self._check()
        self._entries = {}
        self._dirty = True

    # Hierarchy

    def children_names(self) -> List[str]:
        """Names of the cached children plus every child directory on disk."""
        self._check()
        try:
            if self.directory.is_dir():
                for entry in self.directory.iterdir():
                    if not entry.is_dir():
                        continue
                    name = self._name_for(entry)
                    if name not in self._children:
                        # Keep the real directory so odd names still map back to it
                        self._children[name] = PreferenceNode(self, name, entry)
        except OSError as e:
            raise BackingStoreError(f"Cannot list {self.directory}: {e}") from e
        return sorted(self._children)

    def _name_for(self, entry: Path) -> str:
        """
        The child name a directory is listed under. Directories whose name is
        not the canonical quoting of a valid node name (or that would alias an
        already listed sibling) keep their raw, possibly suffixed, name so
        every directory maps to exactly one child.
        """
        name = unquote(entry.name)
        if "/" in name or name in (".", "..") or quote(name, safe="") != entry.name:
            logger.warning(f"Unusual preference node directory {entry}; using its raw name")
            name = entry.name
        while name in self._children and self._children[name].directory != entry:
            name += "~"
        return name

    def node(self, path: str) -> "PreferenceNode":
        """
        Returns the node at `path`, creating it (in memory) if needed.

        Relative paths resolve against this node, absolute ones against the
        root. The node is persisted on the next flush().
        """
        self._check()
        if path.startswith("/"):
            return self._root().node(path[1:])
        if path == "":
            return self
        if path.endswith("/") or "//" in path:
            raise ValueError(f"Malformed node path: '{path}'")

        head, _, rest = path.partition("/")
        child = self._child(head)
        return child.node(rest) if rest else child

    def node_exists(self, path: str) -> bool:
        if self._removed:
            return False
        if path.startswith("/"):
            return self._root().node_exists(path[1:])

        node = self
        for part in filter(None, path.split("/")):
            if part not in node.children_names():
                return False
            node = node._children[part]
        return True

    def remove_node(self) -> None:
        """Deletes this node and all of its descendants from the store."""
        self._check()
        if self.parent is None:
            raise ValueError("Cannot remove a root node")
        _delete(self.directory)
        self._mark_removed()
        self.parent._children.pop(self.name, None)

    def _mark_removed(self) -> None:
        for child in self._children.values():
            child._mark_removed()
        self._children.clear()
        self._entries = None
        self._removed = True

    def flush(self) -> None:
        """Persists this node and its cached descendants."""
        self._check()
        if self._dirty:
            _write_entries(self.directory, self._entries or {})
            self._dirty = False
        else:
            try:
                self.directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise BackingStoreError(f"Cannot create {self.directory}: {e}") from e
        for child in list(self._children.values()):
            child.flush()


_roots: Dict[Path, PreferenceNode] = {}


def open_root(directory: Path) -> PreferenceNode:
    """Returns the (cached) root node backed by `directory`."""
    directory = Path(os.path.abspath(directory))
    root = _roots.get(directory)
    if root is None:
        logger.debug(f"Opening preference root at {directory}")
        root = PreferenceNode(None, "", directory)
        _roots[directory] = root
    return root


def system_root() -> PreferenceNode:
    return open_root(get_system_prefs_dir())


def user_root() -> PreferenceNode:
    return open_root(get_user_prefs_dir())


def clear_roots() -> None:
    """Forgets every cached root, so the next open_root() reads the store afresh."""
    _roots.clear()
