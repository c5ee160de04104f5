"""
Input resolver — where WIT text and its dependency packages come from.

Three environments, one normalized shape:

    FileSystemPaths + native disk      → read files, absolute paths
    FileSystemPaths + sandbox tree     → walk the virtual tree, guest paths
    InMemoryFiles                      → no I/O, labels normalized

The parser and the Dart emitter only ever see ``ResolvedInputs``: a root
document plus zero or more dependency documents, each as text with a
logical path.

Dependency discovery convention (both filesystem flavours): every other
``*.wit`` file in the root file's directory, then every ``*.wit`` below a
``deps/`` sub-directory.  Each group is sorted by path so the document
order (and therefore the output) never depends on directory listing order.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from pathlib import Path

from witdart.core.errors import InputNotFoundError
from witdart.core.models.config import FileSystemPaths, InMemoryFiles
from witdart.core.models.wasi import WasiConfig, WasiDirectory, WasiFile
from witdart.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)

WIT_SUFFIX = ".wit"
DEPS_DIR = "deps"


@dataclass(frozen=True)
class WitSource:
    """One WIT document: logical path + raw text."""

    path: str
    contents: str


@dataclass(frozen=True)
class ResolvedInputs:
    """The root document and the package documents it may import."""

    world_file: WitSource
    pkg_files: tuple[WitSource, ...] = ()

    @property
    def documents(self) -> tuple[WitSource, ...]:
        """Root first, then packages in discovery order."""
        return (self.world_file, *self.pkg_files)


def resolve_inputs(
    inputs: FileSystemPaths | InMemoryFiles,
    wasi_config: WasiConfig | None = None,
    *,
    base_path: Path | None = None,
) -> Result[ResolvedInputs, InputNotFoundError]:
    """Load the root WIT document and its dependencies.

    Args:
        inputs: The input source variant from the generator config.
        wasi_config: Preopened directories and, for sandboxed execution,
            the virtual filesystem tree.  None means plain native access.
        base_path: Directory that relative native paths are joined to.
            Defaults to the process working directory.

    Returns:
        Ok(ResolvedInputs) or Err(InputNotFoundError) naming the path.
    """
    if isinstance(inputs, InMemoryFiles):
        return _resolve_in_memory(inputs)

    wasi = wasi_config or WasiConfig()
    if wasi.is_sandboxed:
        return _resolve_sandboxed(inputs.input_path, wasi)
    return _resolve_native(inputs.input_path, wasi, base_path)


# ── In memory ───────────────────────────────────────────────────


def _normalize_label(path: str) -> str:
    label = path.replace("\\", "/")
    return posixpath.normpath(label) if label else label


def _resolve_in_memory(inputs: InMemoryFiles) -> Result[ResolvedInputs, InputNotFoundError]:
    world = WitSource(_normalize_label(inputs.world_file.path), inputs.world_file.contents)
    pkgs = tuple(WitSource(_normalize_label(f.path), f.contents) for f in inputs.pkg_files)
    logger.debug("Resolved in-memory input %s (+%d package files)", world.path, len(pkgs))
    return Ok(ResolvedInputs(world_file=world, pkg_files=pkgs))


# ── Native filesystem ───────────────────────────────────────────


def _resolve_native(
    input_path: str,
    wasi: WasiConfig,
    base_path: Path | None,
) -> Result[ResolvedInputs, InputNotFoundError]:
    # A guest path under a preopened directory maps onto its host directory
    host = wasi.to_host_path(input_path) or input_path

    path = Path(host)
    if not path.is_absolute() and base_path is not None:
        path = Path(base_path) / path
    path = path.resolve()

    if not path.is_file():
        return Err(InputNotFoundError(str(path), "no such file"))

    root = _read_native(path)
    if root.is_err:
        return root

    pkgs: list[WitSource] = []
    for dep in _discover_native(path):
        read = _read_native(dep)
        if read.is_err:
            return read
        pkgs.append(read.value)

    logger.debug("Resolved %s from disk (+%d package files)", path, len(pkgs))
    return Ok(ResolvedInputs(world_file=root.value, pkg_files=tuple(pkgs)))


def _read_native(path: Path) -> Result[WitSource, InputNotFoundError]:
    try:
        contents = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return Err(InputNotFoundError(str(path), "not valid UTF-8"))
    except OSError as e:
        return Err(InputNotFoundError(str(path), e.strerror or str(e)))
    return Ok(WitSource(path=str(path), contents=contents))


def _discover_native(root: Path) -> list[Path]:
    """Sibling ``*.wit`` files, then everything under ``deps/``."""
    parent = root.parent
    siblings = sorted(
        (p for p in parent.glob(f"*{WIT_SUFFIX}") if p.is_file() and p != root),
        key=str,
    )
    deps_dir = parent / DEPS_DIR
    deps: list[Path] = []
    if deps_dir.is_dir():
        deps = sorted(
            (p for p in deps_dir.rglob(f"*{WIT_SUFFIX}") if p.is_file()),
            key=str,
        )
    return siblings + deps


# ── Sandboxed (virtual tree) ────────────────────────────────────


def _resolve_sandboxed(
    input_path: str,
    wasi: WasiConfig,
) -> Result[ResolvedInputs, InputNotFoundError]:
    guest = posixpath.normpath(input_path.replace("\\", "/"))
    host = wasi.to_host_path(guest)
    if host is None:
        return Err(InputNotFoundError(guest, "no preopened directory matches"))

    node = wasi.lookup(host)
    if not isinstance(node, WasiFile):
        return Err(InputNotFoundError(guest, "no such file"))

    root = _decode(guest, node)
    if root.is_err:
        return root

    guest_dir = posixpath.dirname(guest)
    directory = wasi.lookup(posixpath.dirname(host.replace("\\", "/")))
    pkgs: list[WitSource] = []
    if isinstance(directory, WasiDirectory):
        for rel, file in _discover_virtual(directory, posixpath.basename(guest)):
            read = _decode(posixpath.join(guest_dir, rel), file)
            if read.is_err:
                return read
            pkgs.append(read.value)

    logger.debug("Resolved %s from sandbox tree (+%d package files)", guest, len(pkgs))
    return Ok(ResolvedInputs(world_file=root.value, pkg_files=tuple(pkgs)))


def _decode(path: str, file: WasiFile) -> Result[WitSource, InputNotFoundError]:
    try:
        return Ok(WitSource(path=path, contents=file.content.decode("utf-8")))
    except UnicodeDecodeError:
        return Err(InputNotFoundError(path, "not valid UTF-8"))


def _discover_virtual(directory: WasiDirectory, root_name: str) -> list[tuple[str, WasiFile]]:
    siblings = sorted(
        (
            (name, node)
            for name, node in directory.items.items()
            if name != root_name and name.endswith(WIT_SUFFIX) and isinstance(node, WasiFile)
        ),
        key=lambda item: item[0],
    )
    deps_node = directory.items.get(DEPS_DIR)
    deps: list[tuple[str, WasiFile]] = []
    if isinstance(deps_node, WasiDirectory):
        deps = sorted(_walk_virtual(deps_node, DEPS_DIR), key=lambda item: item[0])
    return siblings + deps


def _walk_virtual(directory: WasiDirectory, prefix: str) -> list[tuple[str, WasiFile]]:
    out: list[tuple[str, WasiFile]] = []
    for name, node in directory.items.items():
        rel = f"{prefix}/{name}"
        if isinstance(node, WasiDirectory):
            out.extend(_walk_virtual(node, rel))
        elif name.endswith(WIT_SUFFIX):
            out.append((rel, node))
    return out
