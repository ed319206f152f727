"""UI server module for the timer page, cached assets, and websocket streaming."""

from .commands import CommandError, TimerCommand, apply_command, parse_command
from .config import ServerConfigurationError, UIServerConfig
from .publisher import TimerStatePublisher
from .service import UIServer

__all__ = [
    "CommandError",
    "ServerConfigurationError",
    "TimerCommand",
    "TimerStatePublisher",
    "UIServerConfig",
    "UIServer",
    "apply_command",
    "parse_command",
]
