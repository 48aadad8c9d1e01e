class InvalidConfiguration(ValueError):
    """Raised for an empty or inverted range, or an out-of-domain physics constant."""
