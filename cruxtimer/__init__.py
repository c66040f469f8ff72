"""CruxTimer — competition climbing countdown."""

__version__ = "0.1.0"
