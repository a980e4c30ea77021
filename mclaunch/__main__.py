#!/usr/bin/env python3
"""Launcher entry point"""

from .cli import app

if __name__ == "__main__":
    app()
