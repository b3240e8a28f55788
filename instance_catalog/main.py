"""Instance Catalog CLI - browse application instances and their groups."""

import click

from .commands.instances import dir_cmd
from .commands.instances import groups_cmd
from .commands.instances import list_cmd
from .commands.instances import scan_cmd
from .commands.instances import show_cmd
from .logging_setup import init_console_logging
from .logging_setup import init_json_logging


@click.group(invoke_without_command=True)
@click.version_option(package_name="instance-catalog")
@click.option("--log-file", default=None, help="Append JSONL logs to this file")
@click.option("--log-level", default=None, help="Log level for the log file (default: INFO)")
@click.option("-v", "--verbose", is_flag=True, help="Print debug logs to stderr")
@click.pass_context
def cli(ctx: click.Context, log_file: str | None, log_level: str | None, verbose: bool):
    """Instance Catalog - discover, group and inspect application instances."""
    if log_level and not log_file:
        raise click.UsageError("--log-level requires --log-file")
    if log_file:
        init_json_logging(log_file, log_level)
    if verbose:
        init_console_logging("DEBUG")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(list_cmd)
cli.add_command(show_cmd)
cli.add_command(groups_cmd)
cli.add_command(scan_cmd)
cli.add_command(dir_cmd)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
