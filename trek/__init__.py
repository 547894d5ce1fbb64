"""Trek - bookmark places on your own maps."""

__version__ = "0.1.0"
