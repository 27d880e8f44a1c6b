#!/usr/bin/env python3
"""Command line entry point: ``petiteplatypus generate PATH``."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from ..config.settings import ConfigError, Settings
from ..core.errors import PetitePlatypusError
from ..core.generator import create_vault
from ..core.registry import list_vaults
from ..core.templates import get_default_template_source
from ..core.time import format_utc_iso8601, from_epoch_millis
from ..observability.loguru_config import configure_loguru, get_logger
from .cli_common import CLIContext, ExitCode, exit_code_for

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
EPILOG = """
Examples:
  petiteplatypus generate ~/notes        # Create and register a vault
  petiteplatypus -vv generate ./vault    # Same, with debug output
  petiteplatypus vaults                  # List registered vaults
""".strip()

logger = get_logger("cli")


def _settings(ctx: click.Context) -> Settings:
    return ctx.obj["settings"]


@click.group(
    context_settings=CONTEXT_SETTINGS,
    help="Generate Obsidian vault scaffolding",
    epilog=EPILOG,
)
@click.option(
    "--verbose",
    "-v",
    "verbosity",
    count=True,
    help="Increase verbosity level (use multiple times for more verbose output)",
)
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: .env in the current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbosity: int, env_file: Path | None) -> None:
    """Root command."""
    settings = Settings.from_env(env_file)
    configure_loguru(verbosity=verbosity, level=settings.log_level, log_file=settings.log_file)
    logger.debug("Verbosity level: {}", verbosity)
    ctx.obj = {"settings": settings, "verbosity": verbosity}


@cli.command("generate")
@click.argument("vault_path", type=click.Path(path_type=Path))
@click.option(
    "--templates-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory with custom templates (default: packaged templates)",
)
@click.option("--no-lock", is_flag=True, help="Update the registry without taking its lock")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON (machine-readable)")
@click.pass_context
def generate_cmd(
    ctx: click.Context,
    vault_path: Path,
    templates_dir: Path | None,
    no_lock: bool,
    json_output: bool,
) -> int:
    """Generate a new Obsidian vault at VAULT_PATH."""
    settings = _settings(ctx)
    out = CLIContext(json_output=json_output, verbosity=ctx.obj["verbosity"])

    try:
        result = create_vault(
            vault_path,
            templates=get_default_template_source(templates_dir or settings.templates_dir),
            config_dir=settings.config_dir,
            use_lock=settings.registry_lock and not no_lock,
            lock_timeout=settings.lock_timeout,
        )
    except PetitePlatypusError as exc:
        return out.failure(exc)

    return out.success(
        {"path": str(result.absolute_path), "vault_id": result.vault_id},
        [
            f"Successfully created vault at: {result.absolute_path}",
            f"Vault ID: {result.vault_id}",
        ],
    )


@cli.command("vaults")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON (machine-readable)")
@click.pass_context
def vaults_cmd(ctx: click.Context, json_output: bool) -> int:
    """List vaults in the global registry."""
    settings = _settings(ctx)
    out = CLIContext(json_output=json_output, verbosity=ctx.obj["verbosity"])

    try:
        vaults = list_vaults(config_dir=settings.config_dir)
    except PetitePlatypusError as exc:
        return out.failure(exc)

    ordered = sorted(vaults.items(), key=lambda item: item[1].ts)
    data = {vault_id: record.to_dict() for vault_id, record in ordered}
    if not ordered:
        lines = ["No vaults registered"]
    else:
        lines = [
            f"{vault_id}  {format_utc_iso8601(from_epoch_millis(record.ts))}  {record.path}"
            for vault_id, record in ordered
        ]
    return out.success({"vaults": data}, lines)


def main(args: list[str] | None = None) -> int:
    """Main function."""
    try:
        normalized_args = list(args) if args is not None else None
        result = cli.main(args=normalized_args, prog_name="petiteplatypus", standalone_mode=False)
        return int(result) if result is not None else int(ExitCode.SUCCESS)
    except ConfigError as exc:
        click.echo(f"❌ {exc}", err=True)
        return int(ExitCode.CONFIG_ERROR)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except SystemExit as exc:  # pragma: no cover - click normalizes exit codes
        return int(exc.code) if exc.code is not None else 0
    except Exception as exc:
        logger.opt(exception=exc).debug("Unhandled error")
        click.echo(f"❌ {exc}", err=True)
        return int(exit_code_for(exc))


if __name__ == "__main__":  # pragma: no cover - executable module
    sys.exit(main())
