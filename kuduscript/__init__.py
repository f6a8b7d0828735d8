"""kuduscript — generate Kudu deployment scripts for a repository."""

__version__ = "0.1.0"
