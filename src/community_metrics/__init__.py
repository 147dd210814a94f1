"""Community health metrics generator for GitHub organizations."""

__version__ = "0.1.0"
