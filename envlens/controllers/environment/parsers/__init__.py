"""Payload parsers for the environment controller."""

from envlens.controllers.environment.parsers.payload_parser import PayloadParser

__all__ = ["PayloadParser"]
