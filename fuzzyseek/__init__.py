"""Fuzzy matching, ANSI colour extraction, chunked item storage and input history."""

__version__ = "0.43.0"

__all__ = ["algo", "ansi", "cache", "charclass", "chunklist", "history", "item", "normalize"]