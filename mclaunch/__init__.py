"""Command-line Minecraft client launcher."""

__version__ = "0.1.0"
