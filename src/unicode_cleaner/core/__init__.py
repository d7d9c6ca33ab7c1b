"""Core (framework-free) part of Unicode Cleaner: table, scanner, settings, files."""
