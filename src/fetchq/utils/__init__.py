"""Small helpers shared across the package."""

from .filename import deduplicate_filename, generate_filename, sanitize_filename

__all__ = ["deduplicate_filename", "generate_filename", "sanitize_filename"]
