"""Fuzzy and exact matching with scoring, ANSI colour extraction, chunked item storage, a query cache and a history file."""

__version__ = "0.1.0"