"""
Exception types for call sequencing.
"""


class SupersedeError(Exception):
    """Base class for errors raised by the sequencer itself."""
    pass


class NotCallableError(SupersedeError, TypeError):
    """Raised when wrap() is given something that cannot be called."""
    pass
