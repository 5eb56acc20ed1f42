"""Convert an Obsidian vault into site (Hugo-style) or article (Zenn-style) content."""

__version__ = "0.3.0"
