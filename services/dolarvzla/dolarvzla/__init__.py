"""Venezuelan exchange-rate dashboard backend."""

__version__ = "0.1.0"
