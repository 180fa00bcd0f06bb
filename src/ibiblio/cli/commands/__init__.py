"""Top-level ibiblio commands."""
