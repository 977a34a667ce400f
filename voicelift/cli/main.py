"""Main CLI command group for voicelift."""

from __future__ import annotations

import click

import voicelift


@click.group()
@click.version_option(version=voicelift.__version__, prog_name="voicelift")
def cli() -> None:
    """voicelift — speech enhancement (noise gate, voice clarity, pause trimming, levels)."""
