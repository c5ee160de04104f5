"""
WIT syntax tree — the typed model produced by the WIT parser.

Plain frozen dataclasses.  Sequences are tuples so whole documents are
hashable and compare structurally.  Every item keeps the ``///`` docs
attached to it in source order.
"""

from __future__ import annotations

from dataclasses import dataclass

PRIMITIVES = frozenset({
    "bool",
    "s8", "s16", "s32", "s64",
    "u8", "u16", "u32", "u64",
    "float32", "float64",
    "char", "string",
})

# Newer WIT spellings normalized to the canonical names above
PRIMITIVE_ALIASES = {"f32": "float32", "f64": "float64"}


@dataclass(frozen=True)
class WitType:
    """A type reference.

    kind is one of ``primitive``, ``list``, ``option``, ``result``,
    ``tuple`` or ``named``.  ``args`` holds element types; for ``result``
    it is ``(ok, err)`` where either side may be None.
    """

    kind: str
    name: str = ""
    args: tuple[WitType | None, ...] = ()

    @classmethod
    def primitive(cls, name: str) -> WitType:
        return cls("primitive", PRIMITIVE_ALIASES.get(name, name))

    @classmethod
    def named(cls, name: str) -> WitType:
        return cls("named", name)

    @classmethod
    def list_of(cls, element: WitType) -> WitType:
        return cls("list", args=(element,))

    @classmethod
    def option_of(cls, element: WitType) -> WitType:
        return cls("option", args=(element,))

    @classmethod
    def result_of(cls, ok: WitType | None = None, err: WitType | None = None) -> WitType:
        return cls("result", args=(ok, err))

    @classmethod
    def tuple_of(cls, *elements: WitType) -> WitType:
        return cls("tuple", args=tuple(elements))

    def __str__(self) -> str:
        if self.kind in ("primitive", "named"):
            return self.name
        if self.kind == "result":
            ok, err = self.args
            if ok is None and err is None:
                return "result"
            if err is None:
                return f"result<{ok}>"
            return f"result<{ok if ok is not None else '_'}, {err}>"
        inner = ", ".join(str(a) for a in self.args)
        return f"{self.kind}<{inner}>"


@dataclass(frozen=True)
class Field:
    name: str
    ty: WitType
    docs: str = ""


@dataclass(frozen=True)
class Case:
    """A variant / enum / flags / union case.  ``ty`` is the payload, if any."""

    name: str
    ty: WitType | None = None
    docs: str = ""


@dataclass(frozen=True)
class TypeDef:
    """A named type definition.

    kind is one of ``record``, ``variant``, ``enum``, ``flags``,
    ``union`` or ``alias``.
    """

    name: str
    kind: str
    fields: tuple[Field, ...] = ()
    cases: tuple[Case, ...] = ()
    target: WitType | None = None
    docs: str = ""

    def referenced_types(self) -> list[WitType]:
        """Every type expression used inside this definition."""
        out = [f.ty for f in self.fields]
        out.extend(c.ty for c in self.cases if c.ty is not None)
        if self.target is not None:
            out.append(self.target)
        return out


@dataclass(frozen=True)
class Param:
    name: str
    ty: WitType


@dataclass(frozen=True)
class Function:
    """A function signature.

    ``results`` holds either a single unnamed ``Param`` (``-> T``) or the
    named results of ``-> (a: T, b: U)``.
    """

    name: str
    params: tuple[Param, ...] = ()
    results: tuple[Param, ...] = ()
    docs: str = ""

    @property
    def has_named_results(self) -> bool:
        return any(r.name for r in self.results)


@dataclass(frozen=True)
class UseItem:
    """``use path.{name, other as alias}``."""

    path: str
    names: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class Interface:
    name: str
    types: tuple[TypeDef, ...] = ()
    functions: tuple[Function, ...] = ()
    uses: tuple[UseItem, ...] = ()
    docs: str = ""


@dataclass(frozen=True)
class WorldItem:
    """An ``import`` / ``export`` of a world.

    Exactly one of ``function``, ``interface`` (inline or resolved) or
    ``path`` (unresolved interface reference) is set.
    """

    name: str
    function: Function | None = None
    interface: Interface | None = None
    path: str | None = None
    docs: str = ""


@dataclass(frozen=True)
class World:
    name: str
    imports: tuple[WorldItem, ...] = ()
    exports: tuple[WorldItem, ...] = ()
    types: tuple[TypeDef, ...] = ()
    uses: tuple[UseItem, ...] = ()
    docs: str = ""


@dataclass(frozen=True)
class PackageName:
    namespace: str
    name: str
    version: str | None = None

    def __str__(self) -> str:
        base = f"{self.namespace}:{self.name}"
        return f"{base}@{self.version}" if self.version else base


@dataclass(frozen=True)
class WitDocument:
    """One parsed WIT file."""

    path: str
    package: PackageName | None = None
    worlds: tuple[World, ...] = ()
    interfaces: tuple[Interface, ...] = ()

    def get_interface(self, name: str) -> Interface | None:
        for iface in self.interfaces:
            if iface.name == name:
                return iface
        return None
