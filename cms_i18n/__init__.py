"""Multi-locale content groups on top of async SQLAlchemy."""

__version__ = "0.7.0"
