"""cepweather: postal code to temperature lookup across two traced HTTP services."""

__version__ = "0.1.0"
