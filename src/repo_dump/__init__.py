"""Print the files tracked by a git repository, filtered by path and content."""

__version__ = "0.1.0"
