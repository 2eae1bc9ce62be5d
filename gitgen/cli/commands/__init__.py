"""One module per ``gitgen`` subcommand."""
