"""
KidQuest delivery layer.

Components:
- StateStore: SQLite persistence of completions, progress and awards
- kidquest_cli: Rich terminal front end (typer app)
"""

from .state_store import StateStore

__all__ = [
    "StateStore",
]
