"""Command-line interface modules for rasterhex.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from rasterhex.cli.run_convert import run_conversion, main

__all__ = ['run_conversion', 'main']
