"""termtitle - terminal window titles that survive prompts and /clear

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- Never interrupt the interactive shell

An agent publishes a title with ``termtitle set``; the shell prompt hook
(``termtitle hook``) keeps re-asserting it in the session that claimed it and
falls back to the working directory everywhere else.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
