"""Skyforge CLI — Typer-based command-line interface."""
