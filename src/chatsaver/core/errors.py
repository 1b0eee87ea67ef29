"""Error types raised by the conversion core"""


class InvalidInputError(ValueError):
    """Raised when a conversion entry point receives no input at all (None root or text)."""
