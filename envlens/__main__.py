"""Allow ``python -m envlens``."""

from envlens.cli import run

run()
