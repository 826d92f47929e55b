"""homesphere: client core for the HomeSphere real-estate marketplace API."""

__version__ = "0.3.0"
