"""Book API: a minimal CRUD HTTP service for a single Book resource."""

__version__ = "0.1.0"
