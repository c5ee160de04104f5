"""
Dart binding generator.

Turns a resolved ``WitWorldModel`` into one Dart library targeting the
``wasm_wit_component`` runtime.  Every code-shape decision is read from
the ``GeneratorConfig``; nothing else influences the output, so the same
(model, config) pair always yields the same text.

Layout of the generated file:

    [file_header]
    // FILE GENERATED FROM WIT
    imports
    type definitions           (records, flags, variants, unions, enums, aliases)
    imported interfaces        (abstract classes the host implements)
    <World>WorldImports        (host functions passed to ``init``)
    exported interfaces        (classes calling into the component)
    <World>World               (exported functions + ``init``)

Canonical values crossing the boundary use plain Dart objects: records
and flags are ``Map``, variants ``{'case': index, 'value': payload}``,
enums their index, lists ``List`` (or typed lists), tuples ``List``.
"""

from __future__ import annotations

import re

from witdart.core.models.config import GeneratorConfig, Int64Type
from witdart.core.models.wit import Case, Function, Interface, Param, TypeDef, WitType, WorldItem
from witdart.core.services.parsers.wit_resolve import WitWorldModel

GENERATED_MARKER = "// FILE GENERATED FROM WIT"
RUNTIME_IMPORT = "package:wasm_wit_component/wasm_wit_component.dart"

IGNORED_LINTS = (
    "require_trailing_commas",
    "unnecessary_raw_strings",
    "unnecessary_import",
    "unused_import",
    "non_constant_identifier_names",
)

DART_KEYWORDS = frozenset({
    "abstract", "as", "assert", "async", "await", "base", "break", "case",
    "catch", "class", "const", "continue", "covariant", "default", "deferred",
    "do", "dynamic", "else", "enum", "export", "extends", "extension",
    "external", "factory", "false", "final", "finally", "for", "function",
    "hide", "if", "implements", "import", "in", "interface", "is", "late",
    "library", "mixin", "new", "null", "of", "on", "operator", "part",
    "required", "rethrow", "return", "sealed", "set", "show", "static",
    "super", "switch", "sync", "this", "throw", "true", "try", "type",
    "typedef", "var", "void", "when", "while", "with", "yield",
})

HELPER_DOCS = {
    "fromJson": (
        "Returns a new instance from a JSON value.",
        "May throw if the value does not have the expected structure.",
    ),
    "toJson": ("Returns a JSON representation of this value.",),
    "toWasm": ("Returns this as a WASM canonical abi value.",),
    "copyWith": ("Returns a copy of this value with the given fields replaced.",),
    "witName": ("The name of this case in WIT.",),
}

_INT_TYPES = frozenset({"s8", "s16", "s32", "u8", "u16", "u32"})
_INT64_TYPES = frozenset({"s64", "u64"})
_FLOAT_TYPES = frozenset({"float32", "float64"})

_TYPED_LISTS = {
    "u8": "Uint8List",
    "s8": "Int8List",
    "u16": "Uint16List",
    "s16": "Int16List",
    "u32": "Uint32List",
    "s32": "Int32List",
    "u64": "Uint64List",
    "s64": "Int64List",
    "float32": "Float32List",
    "float64": "Float64List",
}

_WORD = re.compile(r"[A-Za-z0-9]+")


# ═══════════════════════════════════════════════════════════════════
#  Names
# ═══════════════════════════════════════════════════════════════════


def pascal_case(name: str) -> str:
    """``record-test`` → ``RecordTest``; ``list<u8>`` → ``ListU8``."""
    return "".join(w[:1].upper() + w[1:] for w in _WORD.findall(name))


def camel_case(name: str) -> str:
    """``map-i`` → ``mapI``, with a trailing ``_`` on Dart keywords."""
    pascal = pascal_case(name)
    camel = pascal[:1].lower() + pascal[1:]
    return f"{camel}_" if camel in DART_KEYWORDS else camel


def _indent(lines: list[str], depth: int = 1) -> list[str]:
    pad = "  " * depth
    return [f"{pad}{line}" if line else line for line in lines]


class _DartContext:
    """Type lookups and config decisions shared by every emitter below."""

    def __init__(self, model: WitWorldModel, config: GeneratorConfig):
        self.model = model
        self.config = config
        self.types = {t.name: t for t in model.types}

    # ── Docs ────────────────────────────────────────────────────

    def docs(self, text: str) -> list[str]:
        if not self.config.generate_docs or not text:
            return []
        return [f"/// {line}".rstrip() for line in text.splitlines()]

    def helper_docs(self, helper: str) -> list[str]:
        if not self.config.generate_docs:
            return []
        return [f"/// {line}" for line in HELPER_DOCS[helper]]

    # ── Type mapping ────────────────────────────────────────────

    def typedef(self, ty: WitType) -> TypeDef | None:
        return self.types.get(ty.name) if ty.kind == "named" else None

    def is_split_union(self, ty: WitType) -> bool:
        """Variant or union emitted without a shared class hierarchy."""
        typedef = self.typedef(ty)
        return (
            typedef is not None
            and typedef.kind in ("variant", "union")
            and not self.config.same_class_union
        )

    def typed_list(self, element: WitType) -> str | None:
        if not self.config.typed_number_lists or element.kind != "primitive":
            return None
        if element.name in _INT64_TYPES and self.config.int64_type != Int64Type.NATIVE_FIXED64:
            return None
        return _TYPED_LISTS.get(element.name)

    def dart_type(self, ty: WitType | None) -> str:
        if ty is None:
            return "void"
        if ty.kind == "primitive":
            return self._primitive(ty.name)
        if ty.kind == "named":
            return pascal_case(ty.name)
        if ty.kind == "list":
            (element,) = ty.args
            return self.typed_list(element) or f"List<{self.dart_type(element)}>"
        if ty.kind == "option":
            inner = self.dart_type(ty.args[0])
            if self.config.use_null_for_option and not inner.endswith("?"):
                return f"{inner}?"
            return f"Option<{inner}>"
        if ty.kind == "result":
            ok, err = ty.args
            return f"Result<{self.dart_type(ok)}, {self.dart_type(err)}>"
        if ty.kind == "tuple":
            return "(" + ", ".join(self.dart_type(a) for a in ty.args) + ")"
        raise ValueError(f"unsupported WIT type kind: {ty.kind}")

    def _primitive(self, name: str) -> str:
        if name == "bool":
            return "bool"
        if name in _INT_TYPES:
            return "int"
        if name in _INT64_TYPES:
            return "int" if self.config.int64_type == Int64Type.NATIVE_FIXED64 else "BigInt"
        if name in _FLOAT_TYPES:
            return "double"
        return "String"

    def unalias(self, ty: WitType) -> WitType:
        """Follow named aliases down to the type they stand for."""
        typedef = self.typedef(ty)
        while typedef is not None and typedef.kind == "alias":
            ty = typedef.target
            typedef = self.typedef(ty)
        return ty

    def is_nullable(self, ty: WitType) -> bool:
        return self.dart_type(self.unalias(ty)).endswith("?")

    # ── Canonical value conversion ──────────────────────────────

    def lift(self, ty: WitType | None, expr: str, depth: int = 0) -> str:
        """Dart expression converting the canonical value ``expr``."""
        if ty is None:
            return "null"
        if ty.kind == "primitive":
            return f"{expr}! as {self._primitive(ty.name)}"

        if ty.kind == "named":
            typedef = self.typedef(ty)
            if typedef is not None and typedef.kind == "alias":
                return self.lift(typedef.target, expr, depth)
            if self.is_split_union(ty):
                return f"{camel_case(ty.name).rstrip('_')}FromWasm({expr})"
            return f"{pascal_case(ty.name)}.fromWasm({expr})"

        v = f"v{depth}"
        if ty.kind == "list":
            (element,) = ty.args
            typed = self.typed_list(element)
            if typed is not None:
                scalar = "double" if element.name in _FLOAT_TYPES else "int"
                return f"{typed}.fromList(({expr}! as List).cast<{scalar}>())"
            return f"({expr}! as Iterable).map(({v}) => {self.lift(element, v, depth + 1)}).toList()"

        if ty.kind == "option":
            inner = self.lift(ty.args[0], v, depth + 1)
            option = f"Option.fromWasm({expr}, ({v}) => {inner})"
            return f"{option}.value" if self.is_nullable(ty) else option

        if ty.kind == "result":
            ok, err = ty.args
            return (
                f"Result.fromWasm({expr}, "
                f"({v}) => {self.lift(ok, v, depth + 1)}, "
                f"({v}) => {self.lift(err, v, depth + 1)})"
            )

        if ty.kind == "tuple":
            items = ", ".join(self.lift(a, f"{v}[{i}]", depth + 1) for i, a in enumerate(ty.args))
            return f"(() {{ final {v} = {expr}! as List; return ({items},); }})()"

        raise ValueError(f"unsupported WIT type kind: {ty.kind}")

    def lower(self, ty: WitType | None, expr: str, depth: int = 0) -> str:
        """Canonical value expression for the Dart value ``expr``."""
        if ty is None or ty.kind == "primitive":
            return expr

        if ty.kind == "named":
            typedef = self.typedef(ty)
            if typedef is not None and typedef.kind == "alias":
                return self.lower(typedef.target, expr, depth)
            if self.is_split_union(ty):
                return f"{camel_case(ty.name).rstrip('_')}ToWasm({expr})"
            return f"{expr}.toWasm()"

        v = f"v{depth}"
        if ty.kind == "list":
            (element,) = ty.args
            inner = self.lower(element, v, depth + 1)
            if self.typed_list(element) is not None or inner == v:
                return expr
            return f"{expr}.map(({v}) => {inner}).toList()"

        if ty.kind == "option":
            inner = self.lower(ty.args[0], v, depth + 1)
            option = f"Option.fromValue({expr})" if self.is_nullable(ty) else expr
            return f"{option}.toWasm(({v}) => {inner})"

        if ty.kind == "result":
            ok, err = ty.args
            return (
                f"{expr}.toWasm("
                f"({v}) => {self.lower(ok, v, depth + 1) if ok is not None else 'null'}, "
                f"({v}) => {self.lower(err, v, depth + 1) if err is not None else 'null'})"
            )

        if ty.kind == "tuple":
            items = ", ".join(
                self.lower(a, f"{expr}.${i + 1}", depth + 1) for i, a in enumerate(ty.args)
            )
            return f"[{items}]"

        raise ValueError(f"unsupported WIT type kind: {ty.kind}")


# ═══════════════════════════════════════════════════════════════════
#  Shared class members
# ═══════════════════════════════════════════════════════════════════


def _json_members(
    ctx: _DartContext,
    class_name: str,
    *,
    from_json: bool = True,
    override: bool = False,
) -> list[str]:
    if not ctx.config.json_serialization:
        return []
    lines: list[str] = []
    if from_json:
        lines += [
            *ctx.helper_docs("fromJson"),
            f"factory {class_name}.fromJson(Object? json) => {class_name}.fromWasm(json);",
            "",
        ]
    lines += ctx.helper_docs("toJson")
    if override:
        lines.append("@override")
    lines += ["Object? toJson() => toWasm();", ""]
    return lines


def _equality_members(ctx: _DartContext, class_name: str, props: list[str], described: str) -> list[str]:
    lines: list[str] = []
    if ctx.config.to_string:
        lines += [
            "@override",
            f"String toString() => '{class_name}({described})';",
            "",
        ]
    if ctx.config.equality_and_hash_code:
        lines += [
            "@override",
            "bool operator ==(Object other) =>",
            "    identical(this, other) ||",
            f"    other is {class_name} &&",
            "        const ObjectComparator().arePropsEqual(_props, other._props);",
            "",
            "@override",
            "int get hashCode => const ObjectComparator().hashProps(_props);",
            "",
            "// ignore: unused_element",
            f"List<Object?> get _props => [{', '.join(props)}];",
            "",
        ]
    return lines


def _class(header: str, body: list[str], docs: list[str]) -> str:
    while body and body[-1] == "":
        body.pop()
    return "\n".join([*docs, f"{header} {{", *_indent(body), "}"])


# ═══════════════════════════════════════════════════════════════════
#  Type definitions
# ═══════════════════════════════════════════════════════════════════


def _record(ctx: _DartContext, typedef: TypeDef) -> str:
    """Records, and flags as records of ``bool`` defaulting to false."""
    name = pascal_case(typedef.name)
    is_flags = typedef.kind == "flags"
    if is_flags:
        members = [(c.name, WitType.primitive("bool"), c.docs) for c in typedef.cases]
    else:
        members = [(f.name, f.ty, f.docs) for f in typedef.fields]

    fields = [(camel_case(wit), wit, ty, docs) for wit, ty, docs in members]
    body: list[str] = []

    for dart_name, _, ty, docs in fields:
        body += [*ctx.docs(docs), f"final {ctx.dart_type(ty)} {dart_name};"]
    if fields:
        body.append("")

    # Constructor
    if fields:
        body.append(f"const {name}({{")
        for dart_name, _, ty, _ in fields:
            if is_flags:
                body.append(f"  this.{dart_name} = false,")
            elif ctx.is_nullable(ty) and not ctx.config.required_option:
                body.append(f"  this.{dart_name},")
            else:
                body.append(f"  required this.{dart_name},")
        body += ["});", ""]
    else:
        body += [f"const {name}();", ""]

    # Canonical conversion
    if fields:
        body += [
            f"factory {name}.fromWasm(Object? value) {{",
            "  final map = value! as Map;",
            f"  return {name}(",
            *[f"    {d}: {ctx.lift(ty, f'map[{wit!r}]')}," for d, wit, ty, _ in fields],
            "  );",
            "}",
            "",
        ]
    else:
        body += [f"factory {name}.fromWasm(Object? value) => const {name}();", ""]

    body += _json_members(ctx, name)

    body += ctx.helper_docs("toWasm")
    if fields:
        body += [
            "Map<String, Object?> toWasm() => {",
            *[f"  {wit!r}: {ctx.lower(ty, d)}," for d, wit, ty, _ in fields],
            "};",
            "",
        ]
    else:
        body += ["Map<String, Object?> toWasm() => const {};", ""]

    if ctx.config.copy_with:
        body += ctx.helper_docs("copyWith")
        if fields:
            body.append(f"{name} copyWith({{")
            for dart_name, _, ty, _ in fields:
                if ctx.is_nullable(ty):
                    inner = ctx.dart_type(ctx.unalias(ty))[:-1]
                    body.append(f"  Option<{inner}>? {dart_name},")
                else:
                    body.append(f"  {ctx.dart_type(ty)}? {dart_name},")
            body += ["}) {", f"  return {name}("]
            for dart_name, _, ty, _ in fields:
                if ctx.is_nullable(ty):
                    body.append(f"    {dart_name}: {dart_name} != null ? {dart_name}.value : this.{dart_name},")
                else:
                    body.append(f"    {dart_name}: {dart_name} ?? this.{dart_name},")
            body += ["  );", "}", ""]
        else:
            body += [f"{name} copyWith() => const {name}();", ""]

    described = ", ".join(f"{d}: ${d}" for d, _, _, _ in fields)
    body += _equality_members(ctx, name, [d for d, _, _, _ in fields], described)
    return _class(f"class {name}", body, ctx.docs(typedef.docs))


def _case_class(ctx: _DartContext, base: str, index: int, case: Case, *, sealed: bool) -> str:
    name = base + pascal_case(case.name)
    header = f"class {name} implements {base}" if sealed else f"class {name}"
    body: list[str] = []
    props: list[str] = []

    if case.ty is not None:
        body += [
            f"final {ctx.dart_type(case.ty)} value;",
            f"const {name}(this.value);",
            "",
        ]
        payload = ctx.lower(case.ty, "value")
        props = ["value"]
    else:
        body += [f"const {name}();", ""]
        payload = "null"

    body += _json_members(ctx, name, from_json=False, override=sealed)
    body += ctx.helper_docs("toWasm")
    if sealed:
        body.append("@override")
    body += [f"Map<String, Object?> toWasm() => {{'case': {index}, 'value': {payload}}};", ""]
    body += _equality_members(ctx, name, props, "$value" if props else "")
    return _class(header, body, ctx.docs(case.docs))


def _case_switch(ctx: _DartContext, typedef: TypeDef) -> list[str]:
    base = pascal_case(typedef.name)
    payload = "map['value']"
    lines = [
        "final map = value! as Map;",
        "return switch (map['case']! as int) {",
    ]
    for index, case in enumerate(typedef.cases):
        name = base + pascal_case(case.name)
        if case.ty is None:
            lines.append(f"  {index} => const {name}(),")
        else:
            lines.append(f"  {index} => {name}({ctx.lift(case.ty, payload)}),")
    lines += [
        f"  _ => throw Exception('Invalid case for {base}: ${{map['case']}}'),",
        "};",
    ]
    return lines


def _variant(ctx: _DartContext, typedef: TypeDef) -> str:
    """Variants and unions (a union case is named after its type)."""
    base = pascal_case(typedef.name)
    sealed = ctx.config.same_class_union
    cases = [_case_class(ctx, base, i, c, sealed=sealed) for i, c in enumerate(typedef.cases)]

    if sealed:
        body = [
            f"factory {base}.fromWasm(Object? value) {{",
            *_indent(_case_switch(ctx, typedef)),
            "}",
            "",
        ]
        if ctx.config.json_serialization:
            body += [
                *ctx.helper_docs("fromJson"),
                f"factory {base}.fromJson(Object? json) => {base}.fromWasm(json);",
                "",
                *ctx.helper_docs("toJson"),
                "Object? toJson();",
                "",
            ]
        body += [*ctx.helper_docs("toWasm"), "Map<String, Object?> toWasm();"]
        head = _class(f"sealed class {base}", body, ctx.docs(typedef.docs))
        return "\n\n".join([head, *cases])

    fn = camel_case(typedef.name).rstrip("_")
    from_wasm = "\n".join([
        f"{base} {fn}FromWasm(Object? value) {{",
        *_indent(_case_switch(ctx, typedef)),
        "}",
    ])
    to_wasm_cases = [
        f"  final {base + pascal_case(c.name)} v => v.toWasm(),"
        for c in typedef.cases
    ]
    to_wasm = "\n".join([
        f"Map<String, Object?> {fn}ToWasm({base} value) => switch (value) {{",
        *to_wasm_cases,
        f"  _ => throw ArgumentError.value(value, 'value', 'Not a {base} case'),",
        "};",
    ])
    alias = "\n".join([*ctx.docs(typedef.docs), f"typedef {base} = Object;"])
    return "\n\n".join([alias, *cases, from_wasm, to_wasm])


def _enum(ctx: _DartContext, typedef: TypeDef) -> str:
    name = pascal_case(typedef.name)
    body: list[str] = []
    for i, case in enumerate(typedef.cases):
        end = ";" if i == len(typedef.cases) - 1 else ","
        body += [*ctx.docs(case.docs), f"{camel_case(case.name)}({case.name!r}){end}"]
    body += [
        "",
        f"const {name}(this.witName);",
        "",
        *ctx.helper_docs("witName"),
        "final String witName;",
        "",
        f"factory {name}.fromWasm(Object? value) => {name}.values[value! as int];",
        "",
    ]
    body += _json_members(ctx, name)
    body += [*ctx.helper_docs("toWasm"), "int toWasm() => index;"]
    return _class(f"enum {name}", body, ctx.docs(typedef.docs))


def _alias(ctx: _DartContext, typedef: TypeDef) -> str:
    return "\n".join([
        *ctx.docs(typedef.docs),
        f"typedef {pascal_case(typedef.name)} = {ctx.dart_type(typedef.target)};",
    ])


def _typedef(ctx: _DartContext, typedef: TypeDef) -> str:
    if typedef.kind in ("record", "flags"):
        return _record(ctx, typedef)
    if typedef.kind in ("variant", "union"):
        return _variant(ctx, typedef)
    if typedef.kind == "enum":
        return _enum(ctx, typedef)
    return _alias(ctx, typedef)


# ═══════════════════════════════════════════════════════════════════
#  Functions
# ═══════════════════════════════════════════════════════════════════


def _return_type(ctx: _DartContext, fn: Function) -> str:
    if not fn.results:
        return "void"
    if fn.has_named_results:
        inner = ", ".join(f"{ctx.dart_type(r.ty)} {camel_case(r.name)}" for r in fn.results)
        return f"({{{inner}}})"
    return ctx.dart_type(fn.results[0].ty)


def _param_list(ctx: _DartContext, params: tuple[Param, ...]) -> str:
    """Inline named parameter list for function types."""
    if not params:
        return "()"
    inner = ", ".join(f"required {ctx.dart_type(p.ty)} {camel_case(p.name)}" for p in params)
    return f"({{{inner}}})"


def _function_type(ctx: _DartContext, fn: Function) -> str:
    return f"{_return_type(ctx, fn)} Function{_param_list(ctx, fn.params)}"


def _lift_results(ctx: _DartContext, fn: Function) -> str:
    if fn.has_named_results:
        items = ", ".join(
            f"{camel_case(r.name)}: {ctx.lift(r.ty, f'results[{i}]')}"
            for i, r in enumerate(fn.results)
        )
        return f"({items})"
    return ctx.lift(fn.results[0].ty, "results[0]")


def _export_method(ctx: _DartContext, fn: Function, field: str) -> list[str]:
    """A method calling the component function stored in ``field``."""
    is_async = ctx.config.async_worker
    ret = _return_type(ctx, fn)
    signature_ret = f"Future<{ret}>" if is_async else ret
    suffix = " async" if is_async else ""
    call_prefix = "await " if is_async else ""
    args = "[" + ", ".join(ctx.lower(p.ty, camel_case(p.name)) for p in fn.params) + "]"

    lines = ctx.docs(fn.docs)
    if fn.params:
        lines.append(f"{signature_ret} {camel_case(fn.name)}({{")
        lines += [f"  required {ctx.dart_type(p.ty)} {camel_case(p.name)}," for p in fn.params]
        lines.append(f"}}){suffix} {{")
    else:
        lines.append(f"{signature_ret} {camel_case(fn.name)}(){suffix} {{")

    if fn.results:
        lines += [
            f"  final results = {call_prefix}{field}({args});",
            f"  return {_lift_results(ctx, fn)};",
        ]
    else:
        lines.append(f"  {call_prefix}{field}({args});")
    lines.append("}")
    return lines


def _component_fn_type(ctx: _DartContext) -> str:
    if ctx.config.async_worker:
        return "Future<List<Object?>> Function(List<Object?>)"
    return "List<Object?> Function(List<Object?>)"


def _component_fn_lookup(ctx: _DartContext, wit_name: str) -> str:
    getter = "getComponentFunctionWorker" if ctx.config.async_worker else "getComponentFunction"
    return f"library.{getter}({wit_name!r})!"


def _import_handler(ctx: _DartContext, fn: Function, wit_name: str, target: str) -> list[str]:
    """``builder.addComponentImport`` call forwarding to a host function."""
    call_args = ", ".join(
        f"{camel_case(p.name)}: {ctx.lift(p.ty, f'args[{i}]')}" for i, p in enumerate(fn.params)
    )
    call = f"{target}({call_args})"
    if not fn.results:
        body = [f"    {call};", "    return [];"]
    elif fn.has_named_results:
        lowered = ", ".join(ctx.lower(r.ty, f"result.{camel_case(r.name)}") for r in fn.results)
        body = [f"    final result = {call};", f"    return [{lowered}];"]
    else:
        body = [f"    final result = {call};", f"    return [{ctx.lower(fn.results[0].ty, 'result')}];"]
    return [
        "builder.addComponentImport(",
        f"  {wit_name!r},",
        "  (List<Object?> args) {",
        *body,
        "  },",
        ");",
    ]


# ═══════════════════════════════════════════════════════════════════
#  World
# ═══════════════════════════════════════════════════════════════════


def _imported_interface(ctx: _DartContext, item: WorldItem) -> str:
    iface: Interface = item.interface
    body: list[str] = []
    for fn in iface.functions:
        body += [*ctx.docs(fn.docs), f"{_return_type(ctx, fn)} {camel_case(fn.name)}{_param_list(ctx, fn.params)};", ""]
    return _class(f"abstract class {pascal_case(item.name)}Import", body, ctx.docs(item.docs))


def _imports_class(ctx: _DartContext, world_name: str) -> str:
    name = f"{world_name}WorldImports"
    fields: list[tuple[str, str, str]] = []
    for item in ctx.model.imports:
        if item.function is not None:
            fields.append((camel_case(item.name), _function_type(ctx, item.function), item.docs))
        else:
            fields.append((camel_case(item.name), f"{pascal_case(item.name)}Import", item.docs))

    body: list[str] = []
    for dart_name, dart_type, docs in fields:
        body += [*ctx.docs(docs), f"final {dart_type} {dart_name};"]
    if fields:
        body += ["", f"const {name}({{", *[f"  required this.{d}," for d, _, _ in fields], "});"]
    else:
        body.append(f"const {name}();")
    return _class(f"class {name}", body, [])


def _exported_interface(ctx: _DartContext, item: WorldItem) -> str:
    iface: Interface = item.interface
    name = f"{pascal_case(item.name)}Export"
    wit_prefix = item.path or item.name
    body = ["final WasmLibrary library;"]
    for fn in iface.functions:
        body.append(f"final {_component_fn_type(ctx)} _{camel_case(fn.name).rstrip('_')};")
    body.append("")

    if iface.functions:
        inits = [
            f"_{camel_case(fn.name).rstrip('_')} = {_component_fn_lookup(ctx, f'{wit_prefix}#{fn.name}')}"
            for fn in iface.functions
        ]
        body.append(f"{name}(this.library)")
        body.append(f"    : {inits[0]}" + ("," if len(inits) > 1 else ";"))
        for i, init in enumerate(inits[1:], start=1):
            body.append(f"      {init}" + ("," if i < len(inits) - 1 else ";"))
    else:
        body.append(f"{name}(this.library);")
    body.append("")

    for fn in iface.functions:
        body += _export_method(ctx, fn, f"_{camel_case(fn.name).rstrip('_')}")
        body.append("")
    return _class(f"class {name}", body, ctx.docs(item.docs))


def _world_class(ctx: _DartContext, world_name: str) -> str:
    name = f"{world_name}World"
    imports_name = f"{world_name}WorldImports"
    functions = [e for e in ctx.model.exports if e.function is not None]
    interfaces = [e for e in ctx.model.exports if e.interface is not None]

    body = [
        f"final {imports_name} imports;",
        "final WasmLibrary library;",
    ]
    for item in interfaces:
        body.append(f"final {pascal_case(item.name)}Export {camel_case(item.name)};")
    for item in functions:
        body.append(f"final {_component_fn_type(ctx)} _{camel_case(item.name).rstrip('_')};")
    body.append("")

    inits = [f"{camel_case(i.name)} = {pascal_case(i.name)}Export(library)" for i in interfaces]
    inits += [
        f"_{camel_case(i.name).rstrip('_')} = {_component_fn_lookup(ctx, i.name)}"
        for i in functions
    ]
    body += [
        f"{name}({{",
        "  required this.imports,",
        "  required this.library,",
    ]
    if inits:
        body.append(f"}})  : {inits[0]}" + ("," if len(inits) > 1 else ";"))
        for i, init in enumerate(inits[1:], start=1):
            body.append(f"      {init}" + ("," if i < len(inits) - 1 else ";"))
    else:
        body.append("});")
    body.append("")

    # init
    body += [
        f"static Future<{name}> init(",
        "  WasmInstanceBuilder builder, {",
        f"  required {imports_name} imports,",
        "}) async {",
    ]
    for item in ctx.model.imports:
        if item.function is not None:
            handler = _import_handler(ctx, item.function, item.name, f"imports.{camel_case(item.name)}")
            body += _indent(handler)
        else:
            prefix = item.path or item.name
            for fn in item.interface.functions:
                target = f"imports.{camel_case(item.name)}.{camel_case(fn.name)}"
                body += _indent(_import_handler(ctx, fn, f"{prefix}#{fn.name}", target))
    body += [
        "  final instance = await builder.build();",
        "  final library = WasmLibrary(instance);",
        f"  return {name}(imports: imports, library: library);",
        "}",
        "",
    ]

    for item in functions:
        body += _export_method(ctx, item.function, f"_{camel_case(item.name).rstrip('_')}")
        body.append("")
    return _class(f"class {name}", body, ctx.docs(ctx.model.docs))


# ═══════════════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════════════


def _file_header(config: GeneratorConfig) -> str:
    lines: list[str] = []
    if config.file_header:
        lines.append(config.file_header.rstrip("\n"))
    lines += [
        GENERATED_MARKER,
        "",
        f"// ignore_for_file: {', '.join(IGNORED_LINTS)}",
        "",
    ]
    if config.async_worker:
        lines.append("import 'dart:async';")
    lines += [
        "import 'dart:typed_data';",
        "",
        f"import '{RUNTIME_IMPORT}';",
    ]
    return "\n".join(lines)


def generate_dart(model: WitWorldModel, config: GeneratorConfig) -> str:
    """Render Dart bindings for ``model``.

    Args:
        model: The resolved world.
        config: Code-shape toggles.

    Returns:
        The complete library text, ending with exactly one newline.
    """
    ctx = _DartContext(model, config)
    world_name = pascal_case(model.name)

    sections = [_file_header(config)]
    sections += [_typedef(ctx, t) for t in model.types]
    sections += [_imported_interface(ctx, i) for i in model.imports if i.interface is not None]
    sections.append(_imports_class(ctx, world_name))
    sections += [_exported_interface(ctx, e) for e in model.exports if e.interface is not None]
    sections.append(_world_class(ctx, world_name))
    return "\n\n".join(sections).rstrip("\n") + "\n"
