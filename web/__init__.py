"""Flask JSON API over a trainer session."""
