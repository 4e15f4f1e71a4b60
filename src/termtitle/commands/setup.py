"""Setup command group for termtitle.

This module wires the setup bricks into commands:
- shell: Install the prompt hook into ~/.bashrc or ~/.zshrc
- remove-shell: Remove the prompt hook again
- permissions: Auto-approve `termtitle set` in the agent settings
- terminal-app: Turn off Terminal.app title decorations (macOS)
- all: Everything that applies to this machine
"""

import logging
import sys

import click
from rich.console import Console

from termtitle.click_group import TermTitleGroup
from termtitle.modules.permission_config import (
    PERMISSION_RULE,
    PermissionConfigError,
    PermissionConfigurator,
)
from termtitle.modules.shell_config import (
    SUPPORTED_SHELLS,
    ShellConfigError,
    ShellConfigurator,
)
from termtitle.modules.terminal_app_config import (
    TerminalAppConfigError,
    TerminalAppConfigurator,
    is_apple_terminal,
)

logger = logging.getLogger(__name__)
console = Console()


def _configure_shell(shell: str | None, rc_file: str | None, yes: bool) -> bool:
    """Run shell setup with confirmation. Returns False on errors."""
    try:
        configurator = ShellConfigurator(shell=shell, rc_file=rc_file)

        if configurator.is_configured():
            console.print(
                f"[green]✓[/green] {configurator.rc_file} is already configured for terminal titles"
            )
            return True

        console.print(
            f"This will add the terminal title prompt hook to {configurator.rc_file}.\n"
            "A backup of the file will be created first."
        )
        if not yes and not click.confirm("Continue?", default=True):
            console.print("Setup cancelled.")
            return True

        result = configurator.configure()
    except ShellConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        return False

    if result.backup_path:
        console.print(f"Backup created: {result.backup_path}")
    console.print(f"[green]✓[/green] {result.message}")
    console.print(f"  Reload your shell configuration: source {result.rc_file}")
    return True


def _configure_permissions(settings_file: str | None) -> bool:
    configurator = PermissionConfigurator(settings_file)
    try:
        result = configurator.configure()
    except PermissionConfigError as e:
        console.print(f"[yellow]⚠ Warning:[/yellow] {e}")
        console.print(f"  To enable auto-approval, add this to {configurator.settings_file}:")
        console.print(f'  "{PERMISSION_RULE}"', markup=False)
        return False

    console.print(f"[green]✓[/green] {result.message}")
    return True


def _configure_terminal_app(profile: str | None) -> bool:
    try:
        result = TerminalAppConfigurator(profile=profile).configure()
    except TerminalAppConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        return False

    console.print(f"[green]✓[/green] {result.message}")
    for flag in result.changed_flags:
        console.print(f"  • {flag} = false")
    return True


@click.group(name="setup", cls=TermTitleGroup)
def setup_group():
    """Install the prompt hook and related settings.

    \b
    EXAMPLES:
        $ termtitle setup all
        $ termtitle setup shell --shell zsh
        $ termtitle setup permissions
        $ termtitle setup terminal-app --profile Basic
    """
    pass


@setup_group.command(name="shell")
@click.option("--shell", type=click.Choice(SUPPORTED_SHELLS), help="Shell to configure")
@click.option("--rc-file", help="Startup file to modify")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def setup_shell(shell: str | None, rc_file: str | None, yes: bool):
    """Install the prompt hook into the shell startup file."""
    if not _configure_shell(shell, rc_file, yes):
        sys.exit(1)


@setup_group.command(name="remove-shell")
@click.option("--shell", type=click.Choice(SUPPORTED_SHELLS), help="Shell to configure")
@click.option("--rc-file", help="Startup file to modify")
def remove_shell(shell: str | None, rc_file: str | None):
    """Remove the prompt hook from the shell startup file."""
    try:
        configurator = ShellConfigurator(shell=shell, rc_file=rc_file)
        removed = configurator.remove()
    except ShellConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if removed:
        console.print(f"[green]✓[/green] Removed prompt hook from {configurator.rc_file}")
    else:
        console.print(f"[yellow]No prompt hook found in {configurator.rc_file}[/yellow]")


@setup_group.command(name="permissions")
@click.option("--settings-file", help="Agent settings file (default ~/.claude/settings.local.json)")
def setup_permissions(settings_file: str | None):
    """Auto-approve `termtitle set` in the agent settings."""
    if not _configure_permissions(settings_file):
        sys.exit(1)


@setup_group.command(name="terminal-app")
@click.option("--profile", help="Terminal.app profile (default: the default profile)")
def setup_terminal_app(profile: str | None):
    """Turn off Terminal.app title decorations (macOS only)."""
    if not _configure_terminal_app(profile):
        sys.exit(1)


@setup_group.command(name="all")
@click.option("--shell", type=click.Choice(SUPPORTED_SHELLS), help="Shell to configure")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
def setup_all(shell: str | None, yes: bool):
    """Run every setup step that applies to this machine."""
    console.print("[cyan]Terminal Title - Setup[/cyan]\n")

    console.print("[blue][1/3][/blue] Configuring auto-approval permission...")
    permissions_ok = _configure_permissions(None)

    console.print("\n[blue][2/3][/blue] Configuring shell prompt hook...")
    shell_ok = _configure_shell(shell, None, yes)

    console.print("\n[blue][3/3][/blue] Configuring terminal...")
    if is_apple_terminal():
        terminal_ok = _configure_terminal_app(None)
    else:
        console.print("  Not running in Terminal.app, nothing to do")
        terminal_ok = True

    if not (permissions_ok and shell_ok and terminal_ok):
        console.print("\n[yellow]Setup finished with warnings.[/yellow]")
        sys.exit(1)

    console.print("\n[green]✓ Setup complete![/green]\n")
    console.print("Next steps:")
    console.print("  1. Open a new terminal (or source your shell startup file)")
    console.print("  2. Test: termtitle set 'Test: Clean Title'")
