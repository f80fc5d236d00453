"""trs - a command-line trash bin.

Moves files and directories into a trash root instead of deleting them,
remembers where they came from, and restores or purges them on request.
"""

__version__ = "1.0.0"
