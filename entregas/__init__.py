"""EntregasWoo delivery dashboard: role resolution and access control."""

__version__ = "1.0.0"
