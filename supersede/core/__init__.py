"""
Core call sequencing primitives.

- Sequencer: stamps calls with tokens and surfaces only the newest outcome
- SUPPRESSED: optional marker for superseded calls
- Errors: package exception types
"""

from .sequencer import Sequencer
from .sentinel import SUPPRESSED
from .errors import SupersedeError, NotCallableError

__all__ = [
    "Sequencer",
    "SUPPRESSED",
    "SupersedeError",
    "NotCallableError",
]
