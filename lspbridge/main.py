# lspbridge/main.py
"""
Entry point for the lspbridge command line interface.

Ensures the project root is in sys.path when run directly, then hands
control to the Typer app (logging is configured in its callback).
"""
import sys
import os

# Ensure the package root is discoverable when run with `python lspbridge/main.py`
if __package__ is None and not hasattr(sys, "frozen"):
    path = os.path.realpath(os.path.abspath(__file__))
    sys.path.insert(0, os.path.dirname(os.path.dirname(path)))

from lspbridge.cli.main import app

if __name__ == "__main__":
    app()
