"""termtitle modules - Self-contained bricks following the brick philosophy

Each module is a self-contained component with clear contracts:
- Shell Configurator: Install the prompt hook into bash/zsh startup files
- Permission Configurator: Auto-approve ``termtitle set`` for the agent
- Terminal.app Configurator: Turn off Terminal.app title decorations
"""

from . import permission_config, shell_config, terminal_app_config

__all__ = [
    "permission_config",
    "shell_config",
    "terminal_app_config",
]
