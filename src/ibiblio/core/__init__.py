"""Core ibiblio resolver modules."""
