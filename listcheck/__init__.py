"""
listcheck - Differential testing for list implementations

Drives a candidate list and a trusted reference through every operation of
the list contract with random arguments and reports the first place their
behavior diverges.
"""

__version__ = "0.1.0"


def __getattr__(name: str):
    """Lazy imports for public API - avoids loading rich/click at import time."""
    if name == "ListTestSession":
        from listcheck.session import ListTestSession
        return ListTestSession
    if name == "ListContract":
        from listcheck.contract import ListContract
        return ListContract
    if name == "ReferenceList":
        from listcheck.containers import ReferenceList
        return ReferenceList
    if name == "DynamicArray":
        from listcheck.containers import DynamicArray
        return DynamicArray
    if name == "Result":
        from listcheck.models import Result
        return Result
    if name == "Divergence":
        from listcheck.models import Divergence
        return Divergence
    raise AttributeError(f"module 'listcheck' has no attribute {name!r}")


__all__ = [
    "__version__",
    "ListTestSession",
    "ListContract",
    "ReferenceList",
    "DynamicArray",
    "Result",
    "Divergence",
]
