"""In-memory mirror of a directory hierarchy with lazy loading and selection.

This package provides the node type, the tree that owns the nodes, and the
helpers used to decide how selected files are rendered.
"""
