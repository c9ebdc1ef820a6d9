"""Core pagination engine, database sources and settings."""
