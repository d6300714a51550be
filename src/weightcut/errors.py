class WeightcutError(Exception):
    """Base class for weightcut errors."""


class ConfigError(WeightcutError):
    """Environment configuration is missing or invalid."""
