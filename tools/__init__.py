"""Serializable entry points over the generators."""
