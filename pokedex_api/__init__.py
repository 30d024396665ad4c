"""Pokedex API: credential/session service and reference-data cache."""

__version__ = "1.0.0"
