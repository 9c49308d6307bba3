"""CLI entrypoint for randkeep."""

import logging
import sys
from pathlib import Path

import click

from . import __version__


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@click.group()
@click.version_option(__version__, prog_name="randkeep")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("randkeep.toml"),
    show_default=True,
    help="TOML file declaring the resources",
)
@click.option(
    "--state",
    "-s",
    "state_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("randkeep.state.json"),
    show_default=True,
    help="JSON state file",
)
@click.option("--verbose", is_flag=True, help="Log plan decisions and upgrade steps")
@click.pass_context
def cli(ctx: click.Context, config_path: Path, state_path: Path, verbose: bool) -> None:
    """randkeep - Random values that are generated once and kept.

    Declare resources in a TOML file, then plan and apply them. Generated
    values are stored in the state file and only change when an input that
    forces replacement changes.
    """
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config_path
    ctx.obj["state"] = state_path


def _require_config(ctx: click.Context) -> Path:
    config_path: Path = ctx.obj["config"]
    if not config_path.exists():
        raise click.BadParameter(f"File '{config_path}' does not exist.", param_hint="--config / -c")
    return config_path


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def plan(ctx: click.Context, output_json: bool) -> None:
    """Show what apply would create, replace, update or remove.

    Exits with status 1 when any resource has an error diagnostic.
    """
    from .commands.resources_cmd import run_plan

    exit_code = run_plan(_require_config(ctx), ctx.obj["state"], output_json)
    sys.exit(exit_code)


@cli.command()
@click.pass_context
def apply(ctx: click.Context) -> None:
    """Generate new values where needed and write the state file.

    Nothing is written when planning reports an error.
    """
    from .commands.resources_cmd import run_apply

    exit_code = run_apply(_require_config(ctx), ctx.obj["state"])
    sys.exit(exit_code)


@cli.command()
@click.argument("address", required=False)
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def show(ctx: click.Context, address: str | None, output_json: bool) -> None:
    """Show stored resources. Sensitive values are hidden."""
    from .commands.resources_cmd import run_show

    exit_code = run_show(ctx.obj["state"], address, output_json)
    sys.exit(exit_code)


@cli.command("import")
@click.argument("kind")
@click.argument("address")
@click.argument("import_id", metavar="ID")
@click.pass_context
def import_(ctx: click.Context, kind: str, address: str, import_id: str) -> None:
    """Adopt an existing value into state.

    Examples:

        randkeep import string api_token 'ExistingValue123'

        randkeep import integer port 8080,1024,65535

        randkeep import id cluster_id my-prefix,p-9hUg
    """
    from .commands.resources_cmd import run_import

    exit_code = run_import(ctx.obj["state"], kind, address, import_id)
    sys.exit(exit_code)


@cli.command()
@click.pass_context
def upgrade(ctx: click.Context) -> None:
    """Rewrite stored records written by older releases at the current schema version."""
    from .commands.resources_cmd import run_upgrade

    exit_code = run_upgrade(ctx.obj["state"])
    sys.exit(exit_code)


@cli.command()
@click.argument("kind", required=False)
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
def kinds(kind: str | None, output_json: bool) -> None:
    """List resource kinds, or show the attributes of one kind."""
    from .commands.kinds_cmd import run_kind_info, run_kinds_list

    if kind:
        sys.exit(run_kind_info(kind))
    sys.exit(run_kinds_list(output_json))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
