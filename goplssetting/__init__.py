"""Generators for the VS Code Go extension's gopls settings and docs."""

__version__ = "0.1.0"
