"""In-memory archive tree.

The tree is built incrementally by a single owner and serialized once.
Writing a file under an existing name replaces that entry. Asking for an
existing directory returns it unless the caller replaces it outright.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

_UNSAFE_FOLDER_CHARS = re.compile(r"[^A-Za-z0-9]+")

FALLBACK_FOLDER_KEY = "species"


def folder_key(display_name: str) -> str:
    """Derive a filesystem-safe folder name from a display name.

    Runs of non-alphanumeric characters become a single underscore and
    leading or trailing underscores are dropped. Distinct names can map
    to the same key ("Unknown sp." and "Unknown sp"); the later record's
    folder then replaces the earlier one's.

    >>> folder_key("Red Fox")
    'Red_Fox'
    """
    return _UNSAFE_FOLDER_CHARS.sub("_", display_name).strip("_") or FALLBACK_FOLDER_KEY


def _validate_name(name: str) -> str:
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ValueError(f"Invalid archive entry name: {name!r}")
    return name


@dataclass(frozen=True)
class ArchiveFile:
    """Immutable file content."""

    name: str
    content: bytes


class ArchiveDirectory:
    """Directory node holding named children in insertion order."""

    def __init__(self, name: str):
        self.name = _validate_name(name)
        self.children: dict[str, ArchiveNode] = {}

    def directory(self, name: str) -> "ArchiveDirectory":
        """Return the child directory ``name``, creating it if needed.

        Raises:
            ValueError: If the name is unsafe or already used by a file
        """
        existing = self.children.get(_validate_name(name))
        if isinstance(existing, ArchiveDirectory):
            return existing
        if existing is not None:
            raise ValueError(f"{name!r} already exists as a file in {self.name!r}")
        child = ArchiveDirectory(name)
        self.children[name] = child
        return child

    def replace_directory(self, name: str) -> "ArchiveDirectory":
        """Put a new empty directory at ``name``, dropping any previous one.

        The new directory keeps the old one's position in insertion order.

        Raises:
            ValueError: If the name is unsafe or already used by a file
        """
        if isinstance(self.children.get(_validate_name(name)), ArchiveFile):
            raise ValueError(f"{name!r} already exists as a file in {self.name!r}")
        child = ArchiveDirectory(name)
        self.children[name] = child
        return child

    def write(self, name: str, content: bytes | str) -> ArchiveFile:
        """Write a file, replacing any file already stored under ``name``.

        Text content is stored UTF-8 encoded.

        Raises:
            ValueError: If the name is unsafe or already used by a directory
        """
        if isinstance(self.children.get(_validate_name(name)), ArchiveDirectory):
            raise ValueError(f"{name!r} already exists as a directory in {self.name!r}")
        data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
        node = ArchiveFile(name, data)
        self.children[name] = node
        return node

    def get(self, name: str) -> "ArchiveNode | None":
        """Return a direct child by name."""
        return self.children.get(name)

    def walk(self, prefix: str = "") -> Iterator[tuple[str, "ArchiveNode"]]:
        """Yield (path, node) for this directory and every descendant.

        Paths are slash separated and start with this directory's name;
        directory paths end with a slash.
        """
        base = f"{prefix}{self.name}/"
        yield base, self
        for child in self.children.values():
            if isinstance(child, ArchiveDirectory):
                yield from child.walk(base)
            else:
                yield f"{base}{child.name}", child

    def files(self) -> Iterator[tuple[str, ArchiveFile]]:
        """Yield (path, file) for every file below this directory."""
        for path, node in self.walk():
            if isinstance(node, ArchiveFile):
                yield path, node

    def __len__(self) -> int:
        return len(self.children)

    def __repr__(self) -> str:
        return f"ArchiveDirectory(name={self.name!r}, children={list(self.children)!r})"


ArchiveNode = ArchiveDirectory | ArchiveFile
