"""voicelift CLI.

Registers all commands on the main group.
"""

from voicelift.cli.enhance import enhance_command
from voicelift.cli.main import cli

__all__ = ["cli", "enhance_command"]
