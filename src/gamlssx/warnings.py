class OutOfSupportWarning(UserWarning):
    """Warning raised when a link function maps outside of the parameter support."""
