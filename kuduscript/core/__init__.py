"""Core engine — models, services and use cases."""
