"""Command groups for termtitle CLI."""

from termtitle.commands.config import config_group
from termtitle.commands.setup import setup_group

__all__ = ["config_group", "setup_group"]
