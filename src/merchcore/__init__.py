"""Product variant composition, catalog inventory and provider resolution."""

__version__ = "0.1.0"
