"""Infrastructure adapters for the entry store."""
