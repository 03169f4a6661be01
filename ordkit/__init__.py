"""Ordinal-aware wallet helpers: transaction primitives, fee and postage rules, wallet summaries and page pieces."""

__version__ = "0.1.0"