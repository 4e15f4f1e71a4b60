"""CLI entry point for termtitle.

Commands:
    termtitle set TITLE          # Publish a title (used by agents)
    termtitle hook               # Prompt hook: print shell code for eval
    termtitle status             # Show the title record and session state
    termtitle setup ...          # Install shell hook, permissions, Terminal.app
    termtitle config ...         # Show or change configuration

stdout of ``set`` and ``hook`` carries escape sequences and shell code only.
Logging goes to stderr.
"""

import logging
import shlex
import sys
import time

import click

from termtitle import __version__
from termtitle.claimer import TitleClaimer
from termtitle.click_group import TermTitleGroup
from termtitle.config_manager import ConfigError, ConfigManager
from termtitle.publisher import TitlePublisher
from termtitle.sanitizer import TitleSanitizer
from termtitle.session import SessionContext
from termtitle.terminal import detect_terminal_kind, shell_title_command, write_title

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.group(
    cls=TermTitleGroup,
    invoke_without_command=True,
    lazy_subcommands={
        "setup": "termtitle.commands.setup:setup_group",
        "config": "termtitle.commands.config:config_group",
    },
    context_settings={"help_option_names": ["--help", "-h"]},
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug information to stderr")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """termtitle - terminal window titles that survive prompts and /clear.

    An agent publishes a title with `termtitle set`. The prompt hook keeps
    showing it in the shell session that claimed it and shows the working
    directory everywhere else.

    \b
    COMMANDS:
        set           Publish a window title
        hook          Prompt hook (installed by `termtitle setup shell`)
        status        Show the title record and session state
        setup         Install the prompt hook, permissions, Terminal.app settings
        config        Show or change configuration

    \b
    EXAMPLES:
        $ termtitle set "Refactor auth module"
        $ CLAUDE_TITLE_PREFIX="🤖" termtitle set "Fix tests"
        $ termtitle setup all
        $ termtitle status

    \b
    CONFIGURATION:
        Config file: ~/.claude/terminal_title.toml (override: TERMTITLE_CONFIG)
        Title record: ~/.claude/terminal_title
    """
    _configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


@main.command(name="set")
@click.argument("title", required=False)
@click.option("--config", help="Custom config file path")
def set_title(title: str | None, config: str | None):
    """Publish TITLE as the window title.

    The title is prefixed with the current directory name (and
    $CLAUDE_TITLE_PREFIX when set), saved for the prompt hook and set on
    this terminal immediately. Without a title nothing happens.

    \b
    EXAMPLES:
        $ termtitle set "Build"           # -> "myrepo | Build"
        $ CLAUDE_TITLE_PREFIX="🤖 Bot" termtitle set "Build"
                                          # -> "🤖 Bot myrepo | Build"
    """
    if not title:
        return

    settings = ConfigManager.load_or_default(config)
    publisher = TitlePublisher(
        settings.title_store(),
        max_title_length=settings.max_title_length,
        max_prefix_length=settings.max_prefix_length,
    )
    result = publisher.publish(title, SessionContext.from_environ())

    if result.directory_error:
        sys.exit(1)


@main.command(name="hook")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["shell", "raw"]),
    default="shell",
    show_default=True,
    help="shell: print code for eval; raw: write the escape sequence directly",
)
@click.option("--config", help="Custom config file path")
def hook(output_format: str, config: str | None):
    """Choose and set the title before a prompt is drawn.

    Run from the shell's pre-prompt hook. In shell format the output is
    meant for eval: it sets the title and exports the session claim.
    Never fails.
    """
    try:
        settings = ConfigManager.load_or_default(config)
        claimer = TitleClaimer(
            settings.title_store(),
            freshness_window=settings.freshness_window,
            reset_programs=settings.reset_programs,
        )
        context = SessionContext.from_environ()
        decision = claimer.decide(context)
        title = TitleSanitizer.strip_control_chars(decision.title)

        if output_format == "raw":
            write_title(title, kind=detect_terminal_kind(context.term))
            return

        click.echo(shell_title_command(title))
        if decision.newly_claimed:
            for name, value in decision.context.to_environ().items():
                click.echo(f"export {name}={shlex.quote(value)}")

    except Exception as e:
        # The prompt must never break
        logger.debug(f"Prompt hook failed: {e}", exc_info=True)


@main.command(name="status")
@click.option("--config", help="Custom config file path")
def status(config: str | None):
    """Show the title record and this session's claim state."""
    from rich.console import Console
    from rich.table import Table

    console = Console()

    try:
        settings = ConfigManager.load_config(config)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    store = settings.title_store()
    context = SessionContext.from_environ()
    record = store.read()
    age = store.age(time.time())

    if age is None:
        age_text = "-"
        fresh_text = "-"
    else:
        age_text = f"{age:.0f}s"
        fresh_text = "yes" if age < settings.freshness_window else "no"

    table = Table(title="Terminal Title")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Record file", str(store.path))
    table.add_row("Title", record or "[dim](empty)[/dim]")
    table.add_row("Age", age_text)
    table.add_row("Fresh", fresh_text)
    table.add_row("Session claimed", "yes" if context.claimed else "no")
    table.add_row("Terminal kind", detect_terminal_kind(context.term).value)
    table.add_row(
        "Resets title each prompt",
        "yes" if context.resets_title_each_prompt(settings.reset_programs) else "no",
    )
    table.add_row("Fallback title", context.display_cwd())

    console.print(table)


if __name__ == "__main__":
    main()
