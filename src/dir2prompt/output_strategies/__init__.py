"""Formatting strategies for the segments of a prompt document."""
