"""
World resolution — combine the root document with its packages.

The parser works one document at a time.  This module takes the root
document plus every dependency document and produces the flat model the
Dart emitter consumes:

    - the first world of the root document
    - its imports/exports, with interface references replaced by the
      interface definitions they point at
    - every type definition in scope, deduplicated by name in the order
      it is first seen

Any reference that cannot be resolved is reported as ``WitSyntaxError``
naming the document and the missing name, unless a package file failed
to parse: then that file's syntax error is the more useful report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from witdart.core.errors import WitSyntaxError
from witdart.core.models.wit import (
    Function,
    Interface,
    PackageName,
    TypeDef,
    UseItem,
    WitDocument,
    WitType,
    WorldItem,
)
from witdart.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WitWorldModel:
    """Everything needed to emit bindings for one world."""

    package: PackageName | None
    name: str
    docs: str = ""
    imports: tuple[WorldItem, ...] = ()
    exports: tuple[WorldItem, ...] = ()
    types: tuple[TypeDef, ...] = ()

    def get_type(self, name: str) -> TypeDef | None:
        for typedef in self.types:
            if typedef.name == name:
                return typedef
        return None


class _ResolveFailure(Exception):
    """Internal short-circuit; converted to ``Err`` by ``resolve_world``."""

    def __init__(self, error: WitSyntaxError):
        super().__init__(str(error))
        self.error = error


def _split_package_path(path: str) -> tuple[str, str, str, str | None]:
    """``ns:pkg/iface@1.0.0`` → (ns, pkg, iface, version)."""
    package, _, rest = path.partition("/")
    namespace, _, name = package.partition(":")
    iface, _, version = rest.partition("@")
    return namespace, name, iface, version or None


class _Resolver:
    def __init__(self, documents: list[WitDocument], unparsable: tuple[WitSyntaxError, ...] = ()):
        self.documents = documents
        self.unparsable = unparsable
        self.types: dict[str, TypeDef] = {}

    # ── Interfaces ──────────────────────────────────────────────

    def find_interface(self, path: str, origin: WitDocument) -> tuple[Interface, WitDocument]:
        if ":" not in path:
            iface = origin.get_interface(path)
            if iface is not None:
                return iface, origin
            # Same package, split over several files
            for doc in self.documents:
                if doc is origin or doc.package is None or doc.package != origin.package:
                    continue
                iface = doc.get_interface(path)
                if iface is not None:
                    return iface, doc
            raise self._missing_interface(origin, path)

        namespace, name, iface_name, version = _split_package_path(path)
        for doc in self.documents:
            pkg = doc.package
            if pkg is None or pkg.namespace != namespace or pkg.name != name:
                continue
            if version is not None and pkg.version != version:
                continue
            iface = doc.get_interface(iface_name)
            if iface is not None:
                return iface, doc
        raise self._missing_interface(origin, path)

    # ── Scopes ──────────────────────────────────────────────────

    def scope_of(
        self,
        types: tuple[TypeDef, ...],
        uses: tuple[UseItem, ...],
        origin: WitDocument,
        seen: frozenset[str] = frozenset(),
    ) -> dict[str, TypeDef]:
        """Types visible inside a world or interface body, registering each."""
        scope: dict[str, TypeDef] = {}
        for use in uses:
            iface, doc = self.find_interface(use.path, origin)
            key = f"{doc.path}#{iface.name}"
            if key in seen:
                raise self._fail(origin, f"cyclic use of interface `{use.path}`")
            iface_scope = self.scope_of(iface.types, iface.uses, doc, seen | {key})
            for name, alias in use.names:
                typedef = iface_scope.get(name)
                if typedef is None:
                    raise self._fail(origin, f"interface `{use.path}` has no type `{name}`")
                if alias != name:
                    typedef = TypeDef(alias, "alias", target=WitType.named(typedef.name))
                scope[alias] = typedef
                self.register(typedef)
        for typedef in types:
            scope[typedef.name] = typedef
        for typedef in types:
            self.register(typedef)
        for typedef in types:
            for ty in typedef.referenced_types():
                self.check(ty, scope, typedef.name, origin)
        return scope

    def register(self, typedef: TypeDef) -> None:
        self.types.setdefault(typedef.name, typedef)

    def check(self, ty: WitType | None, scope: dict[str, TypeDef], owner: str, origin: WitDocument) -> None:
        if ty is None:
            return
        if ty.kind == "named":
            if ty.name not in scope:
                raise self._fail(origin, f"unknown type `{ty.name}` referenced by `{owner}`")
            return
        for arg in ty.args:
            self.check(arg, scope, owner, origin)

    def check_function(self, fn: Function, scope: dict[str, TypeDef], origin: WitDocument) -> None:
        for param in (*fn.params, *fn.results):
            self.check(param.ty, scope, fn.name, origin)

    # ── World items ─────────────────────────────────────────────

    def resolve_item(self, item: WorldItem, world_scope: dict[str, TypeDef], origin: WitDocument) -> WorldItem:
        if item.function is not None:
            self.check_function(item.function, world_scope, origin)
            return item

        if item.interface is not None:
            iface, doc = item.interface, origin
        else:
            iface, doc = self.find_interface(item.path or item.name, origin)

        scope = self.scope_of(iface.types, iface.uses, doc)
        for fn in iface.functions:
            self.check_function(fn, scope, doc)
        return WorldItem(
            name=item.name,
            interface=iface,
            path=item.path,
            docs=item.docs or iface.docs,
        )

    def _missing_interface(self, origin: WitDocument, path: str) -> _ResolveFailure:
        # The interface may live in a package file that failed to parse
        if self.unparsable:
            return _ResolveFailure(self.unparsable[0])
        return self._fail(origin, f"unknown interface `{path}`")

    @staticmethod
    def _fail(origin: WitDocument, detail: str) -> _ResolveFailure:
        return _ResolveFailure(WitSyntaxError(origin.path, detail))


def resolve_world(documents, unparsable=()) -> Result[WitWorldModel, WitSyntaxError]:
    """Resolve the first world of the root document.

    Args:
        documents: Parsed documents, root first, then dependencies.
        unparsable: Syntax errors of package files that could not be
            parsed.  The first one is reported in place of an unknown
            interface, since the interface may be defined there.

    Returns:
        Ok(WitWorldModel) or Err(WitSyntaxError) for unresolved names.
    """
    documents = list(documents)
    if not documents:
        return Err(WitSyntaxError("<memory>", "no WIT documents to resolve"))

    root = documents[0]
    if not root.worlds:
        return Err(WitSyntaxError(root.path, "no world declared"))
    world = root.worlds[0]

    resolver = _Resolver(documents, tuple(unparsable))
    try:
        scope = resolver.scope_of(world.types, world.uses, root)
        imports = tuple(resolver.resolve_item(i, scope, root) for i in world.imports)
        exports = tuple(resolver.resolve_item(e, scope, root) for e in world.exports)
    except _ResolveFailure as failure:
        return Err(failure.error)

    model = WitWorldModel(
        package=root.package,
        name=world.name,
        docs=world.docs,
        imports=imports,
        exports=exports,
        types=tuple(resolver.types.values()),
    )
    logger.debug(
        "Resolved world %s: %d import(s), %d export(s), %d type(s)",
        model.name,
        len(model.imports),
        len(model.exports),
        len(model.types),
    )
    return Ok(model)
