"""
WIT parser — turn WIT text into a ``WitDocument``.

Uses ``lark`` with an LALR grammar.  Never evaluates anything; the result
is a plain syntax tree, name resolution happens in ``wit_resolve``.

Both the older dialect (no semicolons) and the current one (``;`` after
every item) are accepted.  ``///`` doc comments are collected from the
raw text by line number and attached to the item that follows them.

Public API:
    parse_wit(contents, path)  → Ok(WitDocument) | Err(WitSyntaxError)
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from witdart.core.errors import WitSyntaxError
from witdart.core.models.wit import (
    Case,
    Field,
    Function,
    Interface,
    PackageName,
    Param,
    TypeDef,
    UseItem,
    WitDocument,
    WitType,
    World,
    WorldItem,
)
from witdart.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)


WIT_GRAMMAR = r"""
start: package_decl? _toplevel*

package_decl: "package" package_id _semi?
package_id: ID ":" ID ("@" VERSION)?

_toplevel: world_def | interface_def

// ── Worlds ─────────────────────────────────────────────────────

world_def: "world" ID "{" _world_item* "}"
_world_item: world_import | world_export | _typedef | use_item

world_import: "import" extern _semi?
world_export: "export" extern _semi?

extern: ID ":" func_type                              -> extern_func
      | ID ":" "interface" "{" _interface_item* "}"   -> extern_interface
      | use_path                                      -> extern_path

// ── Interfaces ─────────────────────────────────────────────────

interface_def: "interface" ID "{" _interface_item* "}"
_interface_item: func_item | _typedef | use_item

func_item: ID ":" func_type _semi?

use_item: "use" use_path "." "{" use_name ("," use_name)* ","? "}" _semi?
use_name: ID ("as" ID)?
use_path: ID                                   -> local_path
        | ID ":" ID "/" ID ("@" VERSION)?      -> package_path

// ── Type definitions ───────────────────────────────────────────

_typedef: record_def | variant_def | enum_def | flags_def | union_def | type_alias

record_def: "record" ID "{" (field ("," field)* ","?)? "}" _semi?
field: ID ":" ty

variant_def: "variant" ID "{" (case ("," case)* ","?)? "}" _semi?
case: ID ("(" ty ")")?

enum_def: "enum" ID "{" (enum_case ("," enum_case)* ","?)? "}" _semi?
flags_def: "flags" ID "{" (enum_case ("," enum_case)* ","?)? "}" _semi?
enum_case: ID

union_def: "union" ID "{" (union_case ("," union_case)* ","?)? "}" _semi?
union_case: ty

type_alias: "type" ID "=" ty _semi?

// ── Functions ──────────────────────────────────────────────────

func_type: "func" "(" params ")" results?
params: (param ("," param)* ","?)?
param: ID ":" ty
results: "->" ty                 -> anon_results
       | "->" "(" params ")"     -> named_results

// ── Types ──────────────────────────────────────────────────────

?ty: prim_type
   | "list" "<" ty ">"                   -> list_type
   | "option" "<" ty ">"                 -> option_type
   | "result" "<" ty "," ty ">"          -> result_both
   | "result" "<" "_" "," ty ">"         -> result_err
   | "result" "<" ty ">"                 -> result_ok
   | "result"                            -> result_empty
   | "tuple" "<" ty ("," ty)* ","? ">"   -> tuple_type
   | ID                                  -> named_type

!prim_type: "bool" | "s8" | "s16" | "s32" | "s64"
          | "u8" | "u16" | "u32" | "u64"
          | "float32" | "float64" | "f32" | "f64"
          | "char" | "string"

_semi: ";"

ID: /%?[a-zA-Z][a-zA-Z0-9]*(-[a-zA-Z0-9]+)*/
VERSION: /\d+\.\d+\.\d+(-[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*)?(\+[0-9A-Za-z-]+(\.[0-9A-Za-z-]+)*)?/

COMMENT: /\/\/[^\n]*/
BLOCK_COMMENT: /\/\*[\s\S]*?\*\//

%import common.WS
%ignore WS
%ignore COMMENT
%ignore BLOCK_COMMENT
"""

_DOC_LINE = re.compile(r"^\s*///\s?(.*?)\s*$")


@lru_cache(maxsize=1)
def _get_parser() -> Lark:
    return Lark(
        WIT_GRAMMAR,
        parser="lalr",
        propagate_positions=True,
        maybe_placeholders=False,
    )


def _collect_docs(contents: str) -> dict[int, str]:
    """Map 1-based line numbers of ``///`` comment lines to their text."""
    docs: dict[int, str] = {}
    for lineno, line in enumerate(contents.splitlines(), start=1):
        m = _DOC_LINE.match(line)
        if m:
            docs[lineno] = m.group(1)
    return docs


def _id(token: Token) -> str:
    """Identifier text without the ``%`` keyword escape."""
    value = str(token)
    return value[1:] if value.startswith("%") else value


class _WitTransformer(Transformer):
    """Build the ``witdart.core.models.wit`` tree from the lark parse tree."""

    def __init__(self, path: str, doc_lines: dict[int, str]):
        super().__init__()
        self._path = path
        self._doc_lines = doc_lines

    def _docs(self, meta) -> str:
        line = getattr(meta, "line", None)
        if line is None:
            return ""
        collected: list[str] = []
        current = line - 1
        while current in self._doc_lines:
            collected.append(self._doc_lines[current])
            current -= 1
        return "\n".join(reversed(collected))

    # ── Document ────────────────────────────────────────────────

    def start(self, children):
        package = None
        worlds: list[World] = []
        interfaces: list[Interface] = []
        for child in children:
            if isinstance(child, PackageName):
                package = child
            elif isinstance(child, World):
                worlds.append(child)
            elif isinstance(child, Interface):
                interfaces.append(child)
        return WitDocument(
            path=self._path,
            package=package,
            worlds=tuple(worlds),
            interfaces=tuple(interfaces),
        )

    def package_decl(self, children):
        return children[0]

    def package_id(self, children):
        version = str(children[2]) if len(children) > 2 else None
        return PackageName(namespace=_id(children[0]), name=_id(children[1]), version=version)

    # ── Worlds ──────────────────────────────────────────────────

    @v_args(meta=True)
    def world_def(self, meta, children):
        imports: list[WorldItem] = []
        exports: list[WorldItem] = []
        types: list[TypeDef] = []
        uses: list[UseItem] = []
        for child in children[1:]:
            if isinstance(child, tuple):
                direction, item = child
                (imports if direction == "import" else exports).append(item)
            elif isinstance(child, TypeDef):
                types.append(child)
            elif isinstance(child, UseItem):
                uses.append(child)
        return World(
            name=_id(children[0]),
            imports=tuple(imports),
            exports=tuple(exports),
            types=tuple(types),
            uses=tuple(uses),
            docs=self._docs(meta),
        )

    @v_args(meta=True)
    def world_import(self, meta, children):
        return ("import", self._with_docs(children[0], meta))

    @v_args(meta=True)
    def world_export(self, meta, children):
        return ("export", self._with_docs(children[0], meta))

    def _with_docs(self, item: WorldItem, meta) -> WorldItem:
        docs = self._docs(meta)
        function = item.function
        if function is not None and docs:
            function = Function(function.name, function.params, function.results, docs)
        return WorldItem(
            name=item.name,
            function=function,
            interface=item.interface,
            path=item.path,
            docs=docs,
        )

    def extern_func(self, children):
        name = _id(children[0])
        fn: Function = children[1]
        return WorldItem(name=name, function=Function(name, fn.params, fn.results))

    def extern_interface(self, children):
        name = _id(children[0])
        return WorldItem(name=name, interface=self._interface(name, children[1:], ""))

    def extern_path(self, children):
        path: str = children[0]
        name = path.split("/")[-1].split("@")[0]
        return WorldItem(name=name, path=path)

    # ── Interfaces ──────────────────────────────────────────────

    @v_args(meta=True)
    def interface_def(self, meta, children):
        return self._interface(_id(children[0]), children[1:], self._docs(meta))

    def _interface(self, name: str, items, docs: str) -> Interface:
        return Interface(
            name=name,
            types=tuple(i for i in items if isinstance(i, TypeDef)),
            functions=tuple(i for i in items if isinstance(i, Function)),
            uses=tuple(i for i in items if isinstance(i, UseItem)),
            docs=docs,
        )

    @v_args(meta=True)
    def func_item(self, meta, children):
        fn: Function = children[1]
        return Function(_id(children[0]), fn.params, fn.results, self._docs(meta))

    def use_item(self, children):
        return UseItem(path=children[0], names=tuple(children[1:]))

    def use_name(self, children):
        name = _id(children[0])
        alias = _id(children[1]) if len(children) > 1 else name
        return (name, alias)

    def local_path(self, children):
        return _id(children[0])

    def package_path(self, children):
        path = f"{_id(children[0])}:{_id(children[1])}/{_id(children[2])}"
        if len(children) > 3:
            path += f"@{children[3]}"
        return path

    # ── Type definitions ────────────────────────────────────────

    @v_args(meta=True)
    def record_def(self, meta, children):
        return TypeDef(_id(children[0]), "record", fields=tuple(children[1:]), docs=self._docs(meta))

    @v_args(meta=True)
    def field(self, meta, children):
        return Field(_id(children[0]), children[1], self._docs(meta))

    @v_args(meta=True)
    def variant_def(self, meta, children):
        return TypeDef(_id(children[0]), "variant", cases=tuple(children[1:]), docs=self._docs(meta))

    @v_args(meta=True)
    def case(self, meta, children):
        ty = children[1] if len(children) > 1 else None
        return Case(_id(children[0]), ty, self._docs(meta))

    @v_args(meta=True)
    def enum_def(self, meta, children):
        return TypeDef(_id(children[0]), "enum", cases=tuple(children[1:]), docs=self._docs(meta))

    @v_args(meta=True)
    def flags_def(self, meta, children):
        return TypeDef(_id(children[0]), "flags", cases=tuple(children[1:]), docs=self._docs(meta))

    @v_args(meta=True)
    def enum_case(self, meta, children):
        return Case(_id(children[0]), None, self._docs(meta))

    @v_args(meta=True)
    def union_def(self, meta, children):
        return TypeDef(_id(children[0]), "union", cases=tuple(children[1:]), docs=self._docs(meta))

    @v_args(meta=True)
    def union_case(self, meta, children):
        ty: WitType = children[0]
        return Case(str(ty), ty, self._docs(meta))

    @v_args(meta=True)
    def type_alias(self, meta, children):
        return TypeDef(_id(children[0]), "alias", target=children[1], docs=self._docs(meta))

    # ── Functions ───────────────────────────────────────────────

    def func_type(self, children):
        params = children[0]
        results = children[1] if len(children) > 1 else ()
        return Function("", params, results)

    def params(self, children):
        return tuple(children)

    def param(self, children):
        return Param(_id(children[0]), children[1])

    def anon_results(self, children):
        return (Param("", children[0]),)

    def named_results(self, children):
        return children[0]

    # ── Types ───────────────────────────────────────────────────

    def prim_type(self, children):
        return WitType.primitive(str(children[0]))

    def list_type(self, children):
        return WitType.list_of(children[0])

    def option_type(self, children):
        return WitType.option_of(children[0])

    def result_both(self, children):
        return WitType.result_of(children[0], children[1])

    def result_err(self, children):
        return WitType.result_of(None, children[0])

    def result_ok(self, children):
        return WitType.result_of(children[0], None)

    def result_empty(self, children):
        return WitType.result_of()

    def tuple_type(self, children):
        return WitType.tuple_of(*children)

    def named_type(self, children):
        return WitType.named(_id(children[0]))


def _describe(err: UnexpectedInput) -> str:
    if isinstance(err, UnexpectedCharacters):
        return f"unexpected character {err.char!r}"
    if isinstance(err, UnexpectedEOF):
        return "unexpected end of input"
    if isinstance(err, UnexpectedToken):
        expected = ", ".join(sorted(err.expected))
        token = "end of input" if err.token.type == "$END" else repr(str(err.token))
        return f"unexpected {token}, expected one of: {expected}"
    return str(err)


def parse_wit(contents: str, path: str = "<memory>") -> Result[WitDocument, WitSyntaxError]:
    """Parse one WIT document.

    Args:
        contents: Raw WIT text.
        path: Logical path used in error messages and on the document.

    Returns:
        Ok(WitDocument) or Err(WitSyntaxError) with line and column.
    """
    try:
        tree = _get_parser().parse(contents)
    except UnexpectedInput as err:
        line = getattr(err, "line", None)
        column = getattr(err, "column", None)
        if line is None or line < 1:
            line = contents.count("\n") + 1
            column = len(contents.rsplit("\n", 1)[-1]) + 1
        return Err(WitSyntaxError(path, _describe(err), line=line, column=column))

    document = _WitTransformer(path, _collect_docs(contents)).transform(tree)
    logger.debug(
        "Parsed %s: %d world(s), %d interface(s)",
        path,
        len(document.worlds),
        len(document.interfaces),
    )
    return Ok(document)
