"""PS5 Availability — retail stock checks driven by a headless browser."""

__version__ = "1.0.0"
