"""Config command group for termtitle.

Commands:
- show: Print the effective configuration
- set: Change one configuration value
- path: Print the configuration file location
"""

import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from termtitle.click_group import TermTitleGroup
from termtitle.config_manager import ConfigError, ConfigManager

logger = logging.getLogger(__name__)
console = Console()


@click.group(name="config", cls=TermTitleGroup)
def config_group():
    """Show or change termtitle configuration.

    \b
    KEYS:
        title_file          Title record path (default ~/.claude/terminal_title)
        freshness_window    Seconds a new title can be claimed (default 300)
        max_title_length    Title length cap (default 80)
        max_prefix_length   Prefix length cap (default 20)
        reset_programs      Comma-separated $TERM_PROGRAM values that reset
                            titles every prompt (default WarpTerminal)

    \b
    EXAMPLES:
        $ termtitle config show
        $ termtitle config set freshness_window 600
    """
    pass


@config_group.command(name="show")
@click.option("--config", help="Custom config file path")
def show_config(config: str | None):
    """Show the effective configuration."""
    try:
        settings = ConfigManager.load_config(config)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    table = Table(title="termtitle Configuration")
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.to_dict().items():
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        table.add_row(key, str(value))

    console.print(table)
    console.print(f"\nConfig file: {ConfigManager.get_config_path(config)}")


@config_group.command(name="set")
@click.argument("key")
@click.argument("value")
@click.option("--config", help="Custom config file path")
def set_config(key: str, value: str, config: str | None):
    """Set configuration KEY to VALUE.

    \b
    EXAMPLES:
        $ termtitle config set freshness_window 600
        $ termtitle config set reset_programs WarpTerminal,vscode
    """
    try:
        parsed = ConfigManager.parse_value(key, value)
        ConfigManager.update_config(config, **{key: parsed})
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]✓[/green] {key} = {parsed}")


@config_group.command(name="path")
@click.option("--config", help="Custom config file path")
def config_path(config: str | None):
    """Print the configuration file location."""
    click.echo(str(ConfigManager.get_config_path(config)))
