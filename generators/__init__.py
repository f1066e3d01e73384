"""Practice challenge generation."""
