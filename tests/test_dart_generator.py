"""
Tests for the Dart emitter — type mapping and every config toggle.
"""

import textwrap

from witdart.core.models.config import GeneratorConfig, InMemoryFiles, Int64Type, WitFile
from witdart.core.services.generators.dart import (
    GENERATED_MARKER,
    camel_case,
    generate_dart,
    pascal_case,
)
from witdart.core.services.parsers import parse_wit, resolve_world


def _generate(source: str, **options) -> str:
    document = parse_wit(textwrap.dedent(source), "w.wit").unwrap()
    model = resolve_world([document]).unwrap()
    config = GeneratorConfig(
        inputs=InMemoryFiles(world_file=WitFile(path="w.wit", contents="")),
        **options,
    )
    return generate_dart(model, config)


RECORD_WORLD = """\
    world w {
      /// A point.
      record point {
        /// Horizontal.
        x: s32,
        y: s32,
      }

      export origin: func() -> point
    }
"""


# ═══════════════════════════════════════════════════════════════════
#  Names
# ═══════════════════════════════════════════════════════════════════


class TestNames:
    def test_pascal_case(self):
        assert pascal_case("record-test") == "RecordTest"
        assert pascal_case("list<u8>") == "ListU8"
        assert pascal_case("host") == "Host"

    def test_camel_case(self):
        assert camel_case("map-i") == "mapI"
        assert camel_case("receive-i") == "receiveI"

    def test_dart_keywords_escaped(self):
        assert camel_case("class") == "class_"
        assert camel_case("type") == "type_"

    def test_keyword_field(self):
        out = _generate("world w { record r { %type: string } }")
        assert "final String type_;" in out
        assert "'type': type_," in out


# ═══════════════════════════════════════════════════════════════════
#  File layout
# ═══════════════════════════════════════════════════════════════════


class TestLayout:
    def test_header(self):
        out = _generate(RECORD_WORLD)
        assert out.startswith(GENERATED_MARKER + "\n")
        assert "// ignore_for_file: require_trailing_commas" in out
        assert "import 'dart:typed_data';" in out
        assert "import 'package:wasm_wit_component/wasm_wit_component.dart';" in out
        assert "import 'dart:async';" not in out

    def test_custom_file_header(self):
        out = _generate(RECORD_WORLD, file_header="// Copyright 2024\n")
        assert out.startswith("// Copyright 2024\n" + GENERATED_MARKER + "\n")

    def test_ends_with_single_newline(self):
        out = _generate(RECORD_WORLD)
        assert out.endswith("}\n")
        assert not out.endswith("\n\n")

    def test_deterministic(self):
        assert _generate(RECORD_WORLD) == _generate(RECORD_WORLD)

    def test_world_classes(self):
        out = _generate(RECORD_WORLD)
        assert "class WWorldImports {" in out
        assert "class WWorld {" in out
        assert "static Future<WWorld> init(" in out
        assert "_origin = library.getComponentFunction('origin')!;" in out


# ═══════════════════════════════════════════════════════════════════
#  Toggles
# ═══════════════════════════════════════════════════════════════════


class TestToggles:
    def test_everything_on_by_default(self):
        out = _generate(RECORD_WORLD)
        assert "factory Point.fromJson(Object? json) => Point.fromWasm(json);" in out
        assert "Object? toJson() => toWasm();" in out
        assert "Point copyWith({" in out
        assert "String toString() => 'Point(x: $x, y: $y)';" in out
        assert "bool operator ==(Object other) =>" in out
        assert "List<Object?> get _props => [x, y];" in out

    def test_json_off(self):
        out = _generate(RECORD_WORLD, json_serialization=False)
        assert "fromJson" not in out
        assert "toJson" not in out
        assert "factory Point.fromWasm(Object? value) {" in out

    def test_copy_with_off(self):
        assert "copyWith" not in _generate(RECORD_WORLD, copy_with=False)

    def test_to_string_off(self):
        assert "toString" not in _generate(RECORD_WORLD, to_string=False)

    def test_equality_off(self):
        out = _generate(RECORD_WORLD, equality_and_hash_code=False)
        assert "operator ==" not in out
        assert "hashCode" not in out

    def test_docs_on(self):
        out = _generate(RECORD_WORLD)
        assert "/// A point.\nclass Point {" in out
        assert "  /// Horizontal.\n  final int x;" in out
        assert "/// Returns a new instance from a JSON value." in out

    def test_docs_off(self):
        assert "///" not in _generate(RECORD_WORLD, generate_docs=False)

    def test_async_worker(self):
        out = _generate("world w { export run: func() }", async_worker=True)
        assert "import 'dart:async';" in out
        assert "final Future<List<Object?>> Function(List<Object?>) _run;" in out
        assert "library.getComponentFunctionWorker('run')!" in out
        assert "Future<void> run() async {" in out
        assert "await _run([]);" in out

    def test_sync_by_default(self):
        out = _generate("world w { export run: func() }")
        assert "final List<Object?> Function(List<Object?>) _run;" in out
        assert "void run() {" in out


# ═══════════════════════════════════════════════════════════════════
#  Type mapping
# ═══════════════════════════════════════════════════════════════════


class TestIntegers:
    SOURCE = "world w { export f: func(x: s64) -> u64 }"

    def test_arbitrary_precision_default(self):
        out = _generate(self.SOURCE)
        assert "BigInt f({" in out
        assert "required BigInt x," in out

    def test_native_fixed64(self):
        out = _generate(self.SOURCE, int64_type=Int64Type.NATIVE_FIXED64)
        assert "int f({" in out
        assert "required int x," in out

    def test_small_integers_are_int(self):
        out = _generate("world w { export f: func(a: u8, b: s32) -> float32 }")
        assert "double f({" in out
        assert "required int a," in out


class TestLists:
    SOURCE = "world w { record r { a: list<u8>, b: list<u64>, c: list<float32>, d: list<string> } }"

    def test_typed_lists(self):
        out = _generate(self.SOURCE)
        assert "final Uint8List a;" in out
        assert "final List<BigInt> b;" in out
        assert "final Float32List c;" in out
        assert "final List<String> d;" in out
        assert "Uint8List.fromList((map['a']! as List).cast<int>())" in out
        assert "Float32List.fromList((map['c']! as List).cast<double>())" in out

    def test_typed_64_bit_lists_need_native_ints(self):
        out = _generate(self.SOURCE, int64_type=Int64Type.NATIVE_FIXED64)
        assert "final Uint64List b;" in out

    def test_plain_lists(self):
        out = _generate(self.SOURCE, typed_number_lists=False)
        assert "final List<int> a;" in out
        assert "final List<double> c;" in out
        assert "Uint8List" not in out.split("import 'package:")[1]


class TestOptions:
    SOURCE = "world w { record r { name: option<string> } }"

    def test_nullable_by_default(self):
        out = _generate(self.SOURCE)
        assert "final String? name;" in out
        assert "required this.name," not in out
        assert "Option<String>? name," in out

    def test_required_option(self):
        out = _generate(self.SOURCE, required_option=True)
        assert "required this.name," in out

    def test_aliased_option_is_nullable(self):
        out = _generate("""\
            world w {
              type maybe = option<u32>
              record r { count: maybe }
            }
        """)
        assert "final Maybe count;" in out
        assert "required this.count," not in out
        assert "this.count," in out
        assert "Option<int>? count," in out
        assert "count: count != null ? count.value : this.count," in out

    def test_option_class(self):
        out = _generate(self.SOURCE, use_null_for_option=False)
        assert "final Option<String> name;" in out
        assert "'name': name.toWasm((v0) => v0)," in out

    def test_nullable_lowering(self):
        out = _generate(self.SOURCE)
        assert "'name': Option.fromValue(name).toWasm((v0) => v0)," in out
        assert "name: Option.fromWasm(map['name'], (v0) => v0! as String).value," in out


class TestComposites:
    def test_result_and_tuple(self):
        out = _generate("world w { export f: func(t: tuple<u32, string>) -> result<string, u32> }")
        assert "Result<String, int> f({" in out
        assert "required (int, String) t," in out
        assert "[[t.$1, t.$2]]" in out

    def test_named_results(self):
        out = _generate("world w { export split: func(s: string) -> (head: string, rest: list<string>) }")
        assert "({String head, List<String> rest}) split({" in out
        assert "return (head: results[0]! as String, rest: " in out

    def test_alias(self):
        out = _generate("world w { type ids = list<string>\n export f: func() -> ids }")
        assert "typedef Ids = List<String>;" in out
        assert "(results[0]! as Iterable).map((v0) => v0! as String).toList()" in out


# ═══════════════════════════════════════════════════════════════════
#  Variants, unions, enums, flags
# ═══════════════════════════════════════════════════════════════════


class TestVariants:
    SOURCE = """\
        world w {
          variant shape { circle(float64), none }
          export f: func(s: shape) -> shape
        }
    """

    def test_sealed_hierarchy(self):
        out = _generate(self.SOURCE)
        assert "sealed class Shape {" in out
        assert "class ShapeCircle implements Shape {" in out
        assert "class ShapeNone implements Shape {" in out
        assert "0 => ShapeCircle(map['value']! as double)," in out
        assert "1 => const ShapeNone()," in out
        assert "Map<String, Object?> toWasm() => {'case': 0, 'value': value};" in out
        assert "Map<String, Object?> toWasm() => {'case': 1, 'value': null};" in out
        assert "final results = _f([s.toWasm()]);" in out
        assert "return Shape.fromWasm(results[0]);" in out

    def test_split_classes(self):
        out = _generate(self.SOURCE, same_class_union=False)
        assert "typedef Shape = Object;" in out
        assert "sealed class" not in out
        assert "class ShapeCircle {" in out
        assert "Shape shapeFromWasm(Object? value) {" in out
        assert "Map<String, Object?> shapeToWasm(Shape value) => switch (value) {" in out
        assert "final results = _f([shapeToWasm(s)]);" in out
        assert "return shapeFromWasm(results[0]);" in out

    def test_case_to_string(self):
        out = _generate(self.SOURCE)
        assert "String toString() => 'ShapeCircle($value)';" in out
        assert "String toString() => 'ShapeNone()';" in out

    def test_union_cases_named_after_types(self):
        out = _generate("world w { union num { u8, string } }")
        assert "class NumU8 implements Num {" in out
        assert "class NumString implements Num {" in out


class TestEnumsAndFlags:
    def test_enum(self):
        out = _generate("world w { enum color { red, dark-blue } }")
        assert "enum Color {" in out
        assert "red('red')," in out
        assert "darkBlue('dark-blue');" in out
        assert "factory Color.fromWasm(Object? value) => Color.values[value! as int];" in out
        assert "int toWasm() => index;" in out

    def test_flags(self):
        out = _generate("world w { flags perms { read, write } }")
        assert "class Perms {" in out
        assert "final bool read;" in out
        assert "this.read = false," in out
        assert "'write': write," in out


# ═══════════════════════════════════════════════════════════════════
#  Interfaces
# ═══════════════════════════════════════════════════════════════════


class TestInterfaces:
    def test_imported_interface(self):
        out = _generate("world w { import logger: interface { log: func(msg: string) } }")
        assert "abstract class LoggerImport {" in out
        assert "void log({required String msg});" in out
        assert "final LoggerImport logger;" in out
        assert "'logger#log'," in out
        assert "imports.logger.log(msg: args[0]! as String);" in out

    def test_exported_interface(self):
        out = _generate("world w { export api: interface { ping: func() -> u32 } }")
        assert "class ApiExport {" in out
        assert "_ping = library.getComponentFunction('api#ping')!;" in out
        assert "final ApiExport api;" in out
        assert "})  : api = ApiExport(library);" in out
        assert "return results[0]! as int;" in out

    def test_empty_world(self):
        out = _generate("world w {}")
        assert "const WWorldImports();" in out
        assert "  required this.library,\n  });" in out
