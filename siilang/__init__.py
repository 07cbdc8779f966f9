"""Front end pieces and an intermediate representation for a small C-like language."""

__version__ = "0.1.0"