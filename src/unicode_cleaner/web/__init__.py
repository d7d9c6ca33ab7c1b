"""HTTP API for Unicode Cleaner."""
