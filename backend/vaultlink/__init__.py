"""vaultlink - file tools and search over a remote Obsidian vault"""

__version__ = "0.1.0"
