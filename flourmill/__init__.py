"""Flour mill ledger — customer transaction records for a wheat-milling shop."""

__version__ = "0.1.0"
