"""Convert Claude.ai conversation exports into Markdown archives."""

__version__ = "0.1.0"
