"""
CLI commands for generating Dart bindings.

Thin wrappers over ``witdart.core.services.generate``.  ``generate``
hands its raw arguments to ``GeneratorCLIArgs.from_args`` so every
argument error is reported exactly as the parser words it.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from witdart.core.errors import GenerationError
from witdart.core.models.template import GeneratedFile
from witdart.core.result import Result


WIT_SUFFIX = ".wit"
DART_SUFFIX = ".dart"


def default_output_path(wit_path: str) -> str:
    """``wit/host.wit`` → ``wit/host.dart``."""
    if wit_path.endswith(WIT_SUFFIX):
        return wit_path[: -len(WIT_SUFFIX)] + DART_SUFFIX
    return wit_path + DART_SUFFIX


def _write_file(file: GeneratedFile, path: Path) -> Path:
    """Write a generated file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(file.contents, encoding="utf-8")
    return path


def _report(
    result: Result[GeneratedFile, GenerationError],
    quiet: bool = False,
    output_given: bool = False,
) -> bool:
    """Write the file on success and print the outcome. Returns success.

    Without an explicit output path the file lands next to the root WIT
    file, with a ``.dart`` suffix.
    """
    if result.is_err:
        click.secho(f"❌ {result.error}", fg="red")
        return False

    file = result.value
    target = Path(file.path if output_given else default_output_path(file.path))
    try:
        path = _write_file(file, target)
    except OSError as e:
        click.secho(f"❌ Cannot write {target}: {e}", fg="red")
        return False

    if not quiet:
        click.secho(f"✅ Generated {path}", fg="green")
    return True


@click.command(
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def generate(ctx: click.Context, args: tuple[str, ...]) -> None:
    """Generate Dart bindings from a WIT file.

    \b
    witdart generate <witInputPath> [<dartFilePath>] [--watch]
        [--{no-}json-serialization[=bool]] [--{no-}copy-with[=bool]]
        [--{no-}equality-and-hash-code[=bool]] [--{no-}to-string[=bool]]
        [--{no-}generate-docs[=bool]] [--{no-}use-null-for-option[=bool]]
        [--{no-}required-option[=bool]] [--{no-}typed-number-lists[=bool]]
        [--{no-}async-worker[=bool]] [--{no-}same-class-union[=bool]]
        [--{no-}default[=bool]]
    """
    from witdart.core.config.cli_args import GeneratorCLIArgs
    from witdart.core.services.generate import create_dart_wit_generator

    quiet = ctx.obj.get("quiet", False) if ctx.obj else False

    parsed = GeneratorCLIArgs.from_args([*args, *ctx.args])
    if parsed.is_err:
        click.secho(f"❌ {parsed.error}", fg="red")
        sys.exit(1)
    cli_args = parsed.value

    generator = create_dart_wit_generator()

    if cli_args.watch:
        from witdart.core.services.watcher import watch

        click.secho(f"👀 Watching {cli_args.wit_input_path} (Ctrl+C to stop)", fg="cyan")
        output_given = cli_args.dart_file_path is not None
        try:
            watch(generator, cli_args, lambda result: _report(result, quiet, output_given))
        except KeyboardInterrupt:
            click.echo("\nStopped watching.")
        return

    result = generator.generate(cli_args.config, cli_args.dart_file_path)
    if not _report(result, quiet, cli_args.dart_file_path is not None):
        sys.exit(1)


@click.command()
@click.pass_context
def build(ctx: click.Context) -> None:
    """Generate Dart bindings described by witdart.yml."""
    from witdart.core.config.loader import load_build_config
    from witdart.core.errors import ConfigError
    from witdart.core.services.generate import create_dart_wit_generator

    quiet = ctx.obj.get("quiet", False) if ctx.obj else False

    try:
        target = load_build_config(ctx.obj.get("config_path") if ctx.obj else None)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    result = create_dart_wit_generator().generate(target.config, target.output_path)
    if not _report(result, quiet, target.output_path is not None):
        sys.exit(1)
