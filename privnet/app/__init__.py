"""Composition root: adapter wiring and the command-line entry point."""
