"""Ranked duo challenge tracker: match discovery and deterministic scoring."""

__version__ = "0.1.0"
