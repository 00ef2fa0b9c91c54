"""Screens for EnvLens."""

from envlens.screens.environment import EnvironmentScreen

__all__ = ["EnvironmentScreen"]
