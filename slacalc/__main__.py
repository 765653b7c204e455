"""
Convenience entry point for running slacalc directly.

Usage: python -m slacalc [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
