"""
CLI argument parser — flat argument list → ``GeneratorCLIArgs``.

    generate <witInputPath> [<dartFilePath>] [--watch] [--{no-}<flag>[=true|false]] ...

Positionals come first, flags after.  Every flag maps to exactly one
field through the static ``FLAGS`` table; ``--x`` and ``--no-x`` are the
same field for duplicate detection.  Only the first problem found in a
left-to-right scan is reported, with the 0-based token index.

``--default`` / ``--no-default`` sets the default of the helper flags
(json-serialization, copy-with, equality-and-hash-code, to-string,
generate-docs).  The other toggles have fixed defaults.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from witdart.core.errors import (
    ArgumentError,
    ArgumentFormatError,
    DuplicateArgumentError,
    MissingPositionalError,
)
from witdart.core.models.config import FileSystemPaths, GeneratorConfig
from witdart.core.result import Err, Ok, Result

WIT_INPUT_PATH = "witInputPath"

WATCH_FLAG = "watch"
DEFAULT_FLAG = "default"

EXPECTED_FLAG_SHAPE = "Should be --<name>"
EXPECTED_BOOL = "Should be true or false."
POSITIONAL_AFTER_FLAG = "Positional arguments must come before flags."
TOO_MANY_POSITIONALS = "Too many positional arguments."

_FLAG = re.compile(r"--([a-z0-9]+(?:-[a-z0-9]+)*)(?:=(.*))?")


@dataclass(frozen=True)
class Flag:
    """One boolean config flag.

    ``default`` is None for helper flags, whose default follows ``--default``.
    """

    name: str
    field: str
    default: bool | None


FLAGS: tuple[Flag, ...] = (
    Flag("json-serialization", "json_serialization", None),
    Flag("copy-with", "copy_with", None),
    Flag("equality-and-hash-code", "equality_and_hash_code", None),
    Flag("to-string", "to_string", None),
    Flag("generate-docs", "generate_docs", None),
    Flag("use-null-for-option", "use_null_for_option", True),
    Flag("required-option", "required_option", False),
    Flag("typed-number-lists", "typed_number_lists", True),
    Flag("async-worker", "async_worker", False),
    Flag("same-class-union", "same_class_union", True),
)

_BY_NAME = {f.name: f for f in FLAGS}
_PARSER_FLAGS = (WATCH_FLAG, DEFAULT_FLAG)


class GeneratorCLIArgs(BaseModel):
    """Parsed command line of ``witdart generate``.

    Attributes:
        wit_input_path: Root WIT file (first positional).
        dart_file_path: Output path (optional second positional).
        watch:          Regenerate on every input change.
        config:         The generator configuration built from the flags.
    """

    model_config = ConfigDict(frozen=True)

    wit_input_path: str
    dart_file_path: str | None = None
    watch: bool = False
    config: GeneratorConfig

    @classmethod
    def from_args(cls, args: list[str]) -> Result[GeneratorCLIArgs, ArgumentError]:
        """Parse ``args``, reporting the first problem found.

        Returns:
            Ok(GeneratorCLIArgs) or Err(ArgumentError).
        """
        positionals: list[str] = []
        values: dict[str, bool] = {}
        flags_started = False

        for index, token in enumerate(args):
            if not token.startswith("-"):
                if flags_started:
                    return Err(ArgumentFormatError(index, token, POSITIONAL_AFTER_FLAG))
                if len(positionals) == 2:
                    return Err(ArgumentFormatError(index, token, TOO_MANY_POSITIONALS))
                positionals.append(token)
                continue

            flags_started = True
            match = _FLAG.fullmatch(token)
            if match is None:
                return Err(ArgumentFormatError(index, token, EXPECTED_FLAG_SHAPE))

            name, raw_value = match.group(1), match.group(2)
            value = True
            if name.startswith("no-"):
                name, value = name[3:], False
            if raw_value is not None:
                if raw_value not in ("true", "false"):
                    return Err(ArgumentFormatError(index, token, EXPECTED_BOOL))
                value = (raw_value == "true") == value

            if name in _PARSER_FLAGS:
                key = name
            elif name in _BY_NAME:
                key = _BY_NAME[name].field
            else:
                return Err(ArgumentFormatError(index, token, f"Unknown argument name `{name}`."))

            if key in values:
                return Err(DuplicateArgumentError(index, token))
            values[key] = value

        if not positionals:
            return Err(MissingPositionalError(WIT_INPUT_PATH))

        wit_input_path = positionals[0]
        helper_default = values.get(DEFAULT_FLAG, True)
        toggles = {
            f.field: values.get(f.field, helper_default if f.default is None else f.default)
            for f in FLAGS
        }
        config = GeneratorConfig(inputs=FileSystemPaths(input_path=wit_input_path), **toggles)
        return Ok(cls(
            wit_input_path=wit_input_path,
            dart_file_path=positionals[1] if len(positionals) > 1 else None,
            watch=values.get(WATCH_FLAG, False),
            config=config,
        ))

    def to_args(self) -> list[str]:
        """The argument list that parses back to this instance.

        Every toggle is written explicitly as ``--<name>=<bool>``.  Only
        what the command line can express is serialized: the input path,
        the output path, ``--watch`` and the boolean toggles.
        """
        args = [self.wit_input_path]
        if self.dart_file_path is not None:
            args.append(self.dart_file_path)
        if self.watch:
            args.append(f"--{WATCH_FLAG}")
        for flag in FLAGS:
            value = getattr(self.config, flag.field)
            args.append(f"--{flag.name}={'true' if value else 'false'}")
        return args
