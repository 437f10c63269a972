"""
WhiteSource agent CLI — `wss` command.

Commands:
  wss compress [file]            gzip + base64 a text payload
  wss decompress [file]          inverse of compress
  wss update <projects.json>     Update the organization inventory
  wss check-policies <projects>  Check policies (deprecated by the service)
  wss check-compliance <...>     Check policy compliance
  wss dependency-data <...>      Fetch additional dependency data
"""

import logging

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install wss-agent-client[cli]")

console = Console(stderr=True)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output to stderr.")
def main(verbose: bool):
    """WhiteSource agent client — send dependency inventories to the service."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# Register subcommands from separate modules
from wss_agent.cli.codec import compress_cmd, decompress_cmd
from wss_agent.cli.service import check_compliance, check_policies, dependency_data, update

main.add_command(compress_cmd)
main.add_command(decompress_cmd)
main.add_command(update)
main.add_command(check_policies)
main.add_command(check_compliance)
main.add_command(dependency_data)


if __name__ == "__main__":
    main()
