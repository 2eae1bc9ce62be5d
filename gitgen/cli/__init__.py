"""gitgen CLI — Typer-based command-line interface.

Provides the ``gitgen`` command with git-like subcommands for staging,
committing and inspecting generations, plus ``cascade``, ``compact``
and ``validate`` for working with specs directly.

All output uses Rich for formatted terminal display.
"""
