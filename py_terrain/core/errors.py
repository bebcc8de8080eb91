"""Exceptions raised by terrain generation."""


class ConfigurationError(ValueError):
    """Raised when generation parameters violate the caller contract.

    Generation fails fast: no partial grid or mesh is returned.
    """
