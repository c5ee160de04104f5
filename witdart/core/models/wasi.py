"""
Sandbox filesystem model — preopened directories and the virtual tree.

A sandboxed guest only sees the directories that were explicitly
preopened for it.  Each ``PreopenedDir`` pairs a guest-visible path with
a host path; translating between the two is pure string manipulation.

When there is no real disk (browser execution), the host side is an
in-memory tree of ``WasiDirectory`` / ``WasiFile`` nodes keyed by the
host path components.  The tree is built once per generation session
and never mutated afterwards.
"""

from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass, field
from typing import Mapping, Union


@dataclass(frozen=True)
class WasiFile:
    """A virtual file holding raw bytes."""

    content: bytes


@dataclass(frozen=True)
class WasiDirectory:
    """A virtual directory mapping names to files or nested directories."""

    items: Mapping[str, WasiNode] = field(default_factory=dict)


WasiNode = Union[WasiFile, WasiDirectory]


def _normalize(path: str) -> str:
    return path.replace("\\", "/")


@dataclass(frozen=True)
class PreopenedDir:
    """A host directory exposed to the guest under ``guest_path``.

    ``guest_path`` is always ``/`` separated, even on Windows hosts.
    """

    guest_path: str
    host_path: str

    @property
    def guest_prefix(self) -> str:
        """The guest path with exactly one trailing slash."""
        return _normalize(self.guest_path).rstrip("/") + "/"

    def to_host_path(self, guest_path: str) -> str | None:
        """Translate a guest path into the host path, or None if outside.

        ``host/host.wit`` and ``/host/host.wit`` name the same guest file:
        guest paths are compared without their leading slash.
        """
        path = _normalize(guest_path).lstrip("/")
        prefix = self.guest_prefix.lstrip("/")
        if path == prefix.rstrip("/"):
            return self.host_path
        if not path.startswith(prefix):
            return None
        relative = path[len(prefix):]
        base = self.host_path.rstrip("/\\")
        return f"{base}/{relative}" if relative else self.host_path

    def to_guest_path(self, host_path: str) -> str | None:
        """Translate a host path back into the guest view, or None if outside."""
        path = _normalize(host_path)
        base = _normalize(self.host_path).rstrip("/")
        if path == base:
            return self.guest_prefix
        if not path.startswith(base + "/"):
            return None
        return self.guest_prefix + path[len(base) + 1:]


@dataclass(frozen=True)
class WasiConfig:
    """Filesystem capabilities of one generation session.

    Attributes:
        preopened_dirs:          Guest ↔ host directory pairs.
        web_browser_file_system: Virtual tree used instead of the real disk.
            Empty means native execution.
    """

    preopened_dirs: tuple[PreopenedDir, ...] = ()
    web_browser_file_system: Mapping[str, WasiNode] = field(default_factory=dict)

    @property
    def is_sandboxed(self) -> bool:
        """True when lookups must go through the virtual tree."""
        return bool(self.web_browser_file_system)

    def to_host_path(self, guest_path: str) -> str | None:
        """Translate through the preopen with the longest matching prefix."""
        candidates = sorted(
            self.preopened_dirs,
            key=lambda d: len(d.guest_prefix),
            reverse=True,
        )
        for preopen in candidates:
            host = preopen.to_host_path(guest_path)
            if host is not None:
                return host
        return None

    def lookup(self, host_path: str) -> WasiNode | None:
        """Walk the virtual tree to ``host_path``."""
        normalized = posixpath.normpath(_normalize(host_path))
        node: WasiNode = WasiDirectory(self.web_browser_file_system)
        for part in normalized.split("/"):
            if part in ("", "."):
                continue
            if not isinstance(node, WasiDirectory):
                return None
            child = node.items.get(part)
            if child is None:
                return None
            node = child
        return node

    def list_directory(self, host_path: str) -> list[str] | None:
        """Sorted entry names of a virtual directory, or None if not a directory."""
        node = self.lookup(host_path)
        if not isinstance(node, WasiDirectory):
            return None
        return sorted(node.items)


def wasi_config_from_path(
    path: str,
    web_browser_file_system: Mapping[str, WasiNode] | None = None,
) -> WasiConfig:
    """Preopen the parent directory of ``path`` as ``/<parent-name>/``.

    Args:
        path: Path to a WIT file on the host (or in the virtual tree).
        web_browser_file_system: Optional virtual tree for sandboxed runs.
    """
    host_dir = os.path.dirname(path) or "."
    name = os.path.basename(os.path.normpath(host_dir))
    if name in ("", ".", ".."):
        name = "root"
    return WasiConfig(
        preopened_dirs=(PreopenedDir(guest_path=f"/{name}/", host_path=host_dir),),
        web_browser_file_system=dict(web_browser_file_system or {}),
    )
