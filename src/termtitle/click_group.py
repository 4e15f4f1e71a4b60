"""Click group that prints contextual help on usage errors.

Help goes to stderr so stdout of ``set`` and ``hook`` never carries anything
but escape sequences and shell code.

Subcommands can be registered lazily as ``"module:attribute"`` strings so the
prompt hook does not pay for importing setup and config commands.
"""

import importlib
from typing import Any

import click


def _fail_with_help(error: click.UsageError, ctx: click.Context) -> None:
    click.echo(f"Error: {error.format_message()}", err=True)
    click.echo("", err=True)
    click.echo(ctx.get_help(), err=True)
    ctx.exit(error.exit_code)


class TermTitleGroup(click.Group):
    """Click group that shows the help of the failing command on usage errors."""

    def __init__(self, *args: Any, lazy_subcommands: dict[str, str] | None = None, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted([*super().list_commands(ctx), *self.lazy_subcommands])

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name in self.lazy_subcommands:
            module_name, attribute = self.lazy_subcommands[cmd_name].split(":")
            return getattr(importlib.import_module(module_name), attribute)
        return super().get_command(ctx, cmd_name)

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            # Prefer the subcommand's context so its own options are listed
            _fail_with_help(e, e.ctx or ctx)
            return None

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            if isinstance(e, click.BadParameter):
                raise
            _fail_with_help(e, ctx)
            return None, None, []


TermTitleGroup.group_class = TermTitleGroup
