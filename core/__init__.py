"""Bead model, formula recognition and difficulty tables for the abacus trainer."""
