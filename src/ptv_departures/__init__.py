"""Live passenger information departure board for a single PTV metro station."""

__version__ = "0.1.0"
