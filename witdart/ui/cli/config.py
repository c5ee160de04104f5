"""
CLI commands for witdart.yml.
"""

from __future__ import annotations

import json
import sys

import click

from witdart.core.use_cases.config_check import ConfigCheckResult


def _print_check(result: ConfigCheckResult) -> None:
    target = result.target
    if not result.valid or target is None:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for message in result.errors:
            click.echo(f"   - {message}")
    else:
        generator_config = target.config
        click.secho(f"✅ Configuration is valid ({result.config_path})", fg="green", bold=True)
        click.echo(f"   Input:   {generator_config.inputs.input_path}")
        click.echo(f"   Output:  {target.output_path or '(next to input)'}")
        flags = generator_config.model_dump(mode="json", exclude={"inputs"})
        enabled = sorted(name for name, value in flags.items() if value is True)
        click.echo(f"   Enabled: {', '.join(enabled) or '(none)'}")

    for message in result.warnings:
        click.secho(f"⚠️  {message}", fg="yellow")


@click.group("config")
def config() -> None:
    """Build configuration commands."""


@config.command("check")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
def check(ctx: click.Context, as_json: bool) -> None:
    """Validate witdart.yml without generating anything."""
    from witdart.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_check(result)
    if not result.valid:
        sys.exit(1)
