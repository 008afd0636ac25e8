"""dfatable CLI module.

Provides command-line interface for transition table files.
"""

from .main import cli, main

__all__ = ['cli', 'main']
