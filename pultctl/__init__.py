"""Control of the TK170 test console: simulator settings, ROM images, settings files and session logs."""

__version__ = "1.0.0"

__all__ = [
    "commands",
    "constants",
    "device",
    "loader",
    "logsetup",
    "mas_data",
    "progress",
    "pzu",
    "settings",
]