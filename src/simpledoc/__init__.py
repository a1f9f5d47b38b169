"""simpledoc — retrofit a repository's Markdown docs to SimpleDoc conventions."""

__version__ = "0.1.0"
