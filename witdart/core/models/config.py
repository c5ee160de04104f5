"""
Generator configuration — the immutable description of one generation.

A config is fully determined by its field values: there is no hidden
environment dependency, so identical configs plus identical input text
always produce identical output.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class WitFile(BaseModel):
    """A WIT document supplied as text, labelled with a logical path."""

    model_config = ConfigDict(frozen=True)

    path: str
    contents: str


class FileSystemPaths(BaseModel):
    """Input read from a (real or sandboxed) filesystem.

    Dependency packages are discovered by convention relative to
    ``input_path`` (sibling ``*.wit`` files and a ``deps/`` directory).
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["file-system"] = "file-system"
    input_path: str


class InMemoryFiles(BaseModel):
    """Input already held in memory — no filesystem access at all."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["in-memory"] = "in-memory"
    world_file: WitFile
    pkg_files: tuple[WitFile, ...] = ()


WitGeneratorInput = Annotated[
    Union[FileSystemPaths, InMemoryFiles],
    Field(discriminator="kind"),
]


class Int64Type(str, Enum):
    """Dart representation for WIT ``s64`` / ``u64``."""

    NATIVE_FIXED64 = "nativeFixed64"            # Dart ``int``
    ARBITRARY_PRECISION = "arbitraryPrecision"  # Dart ``BigInt``


class GeneratorConfig(BaseModel):
    """Every toggle that shapes the generated Dart code.

    Attributes:
        inputs:                 Where the WIT world (and its packages) comes from.
        json_serialization:     Emit ``fromJson`` / ``toJson``.
        copy_with:              Emit ``copyWith`` on records.
        equality_and_hash_code: Emit ``==`` and ``hashCode``.
        to_string:              Emit ``toString``.
        generate_docs:          Emit ``///`` documentation comments.
        file_header:            Text prepended verbatim to the output.
        int64_type:             Representation of 64-bit integers.
        use_null_for_option:    ``option<T>`` → ``T?`` instead of ``Option<T>``.
        required_option:        Nullable option fields are ``required`` params.
        typed_number_lists:     ``list<u8>`` → ``Uint8List`` etc.
        async_worker:           Exported functions return ``Future``.
        same_class_union:       Variant cases share one sealed class hierarchy.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    inputs: WitGeneratorInput
    json_serialization: bool = True
    copy_with: bool = True
    equality_and_hash_code: bool = True
    to_string: bool = True
    generate_docs: bool = True
    file_header: str | None = None
    int64_type: Int64Type = Int64Type.ARBITRARY_PRECISION
    use_null_for_option: bool = True
    required_option: bool = False
    typed_number_lists: bool = True
    async_worker: bool = False
    same_class_union: bool = True


def default_generator_config(inputs: FileSystemPaths | InMemoryFiles) -> GeneratorConfig:
    """The documented default configuration for ``inputs``."""
    return GeneratorConfig(
        inputs=inputs,
        json_serialization=True,
        copy_with=True,
        equality_and_hash_code=True,
        to_string=True,
        generate_docs=True,
        file_header=None,
        int64_type=Int64Type.ARBITRARY_PRECISION,
        use_null_for_option=True,
        required_option=False,
        typed_number_lists=True,
        async_worker=False,
        same_class_union=True,
    )
