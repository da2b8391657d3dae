"""Rules that hide entries from the browsable tree."""
