"""Helpers shared by the core model and the CLI."""
