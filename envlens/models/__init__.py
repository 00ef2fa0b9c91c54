"""Data models for EnvLens."""
