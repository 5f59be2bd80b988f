"""Congkak rules engine and opponent AI."""

__version__ = "0.1.0"
