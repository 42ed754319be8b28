"""dbdiff CLI commands."""
