"""Subcommand modules for cepweather.

Provides register_commands() which uses deferred imports to keep
``cepweather --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from cepweather.commands.serve import serve

    cli.add_command(serve)
