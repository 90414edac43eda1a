"""
Distinguishable marker for suppressed call outcomes.

The default sentinel of a Sequencer is None, which cannot be told apart
from an operation that legitimately returned None. Passing SUPPRESSED as
the sentinel removes that ambiguity:

    seq = Sequencer(sentinel=SUPPRESSED)
    result = await seq.wrap(search)("py")
    if result is SUPPRESSED:
        return  # a newer search is in flight
"""


class _Suppressed:
    """Singleton type of SUPPRESSED."""

    _instance = None

    def __new__(cls) -> "_Suppressed":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SUPPRESSED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "SUPPRESSED"


SUPPRESSED = _Suppressed()
