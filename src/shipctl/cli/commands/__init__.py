"""shipctl subcommands."""
