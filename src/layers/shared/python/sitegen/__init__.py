"""Website generation pipeline shared layer."""

__version__ = "0.4.0"
