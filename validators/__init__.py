"""Board and typed-answer validation."""
