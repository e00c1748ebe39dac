"""gambit: chess rules engine and alpha-beta move search."""

__version__ = "0.1.0"
