"""Typer CLI (``ideagen``)."""
