"""Infrastructure adapters - logging and HTTP."""
