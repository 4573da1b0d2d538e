"""Two-player networked sea battle."""

__version__ = "0.1.0"
