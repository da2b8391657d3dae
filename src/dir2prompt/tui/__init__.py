"""Terminal user interface for an interactive session, built on Textual."""
