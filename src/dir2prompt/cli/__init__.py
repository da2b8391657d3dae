"""Command-line interface: argument parsing, signal handling, and document delivery."""
