"""Console presentation layer: click entry point, rich menu and controllers."""

from guildhall.console.controllers import (
    CharacterController,
    Controllers,
    GuildController,
    create_controllers,
)
from guildhall.console.menu import ConsoleMenu

__all__ = [
    "CharacterController",
    "GuildController",
    "Controllers",
    "ConsoleMenu",
    "create_controllers",
]
