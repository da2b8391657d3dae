"""Interactive directory selection for Large Language Model prompts.

This package lets a user browse a directory tree, pick files and directories,
and turn the selection into a single prompt document containing a pruned tree,
the selected file contents, and a free-text request.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("dir2prompt")
except PackageNotFoundError:
    __version__ = "unknown"
