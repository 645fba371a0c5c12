# src/presentation/__init__.py
"""Presentation helpers for computed values."""

from .currency_formatter import CurrencyFormatter

__all__ = ["CurrencyFormatter"]
