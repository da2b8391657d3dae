"""Filesystem change notification: event types, the watcher, and the router."""
