"""Configuration — optional per-repository defaults file."""
