"""
supersede

Stale response suppression for overlapping asynchronous calls: of several
in-flight calls to a wrapped operation, only the newest one surfaces its
result or exception.
"""

from .core import Sequencer, SUPPRESSED, SupersedeError, NotCallableError
from .instrument import ObservabilityConfig, configure_observability, instrument

__version__ = "0.1.0"

__all__ = [
    "Sequencer",
    "SUPPRESSED",
    "SupersedeError",
    "NotCallableError",
    "ObservabilityConfig",
    "configure_observability",
    "instrument",
]
