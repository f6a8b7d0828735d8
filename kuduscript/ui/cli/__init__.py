"""Click command modules registered by ``kuduscript.main``."""
