"""
CLI subcommands. Each module exposes run(args, settings) -> exit code.
"""

from cli.commands import analyze, compare

__all__ = ["analyze", "compare"]
