"""Status backend factory.

get_backends() returns the (primary, direct) pair used by
``ordering.order.status_update``; set_backends() swaps either one in tests.
"""

from ordering.backend.direct_adapter import DirectStatusBackend
from ordering.backend.pipeline_adapter import PipelineStatusBackend
from ordering.backend.port import StatusBackend, StatusBackendError

__all__ = ["StatusBackend", "StatusBackendError", "get_backends", "reset_backends", "set_backends"]

_primary: StatusBackend | None = None
_direct: StatusBackend | None = None


def get_backends() -> tuple[StatusBackend, StatusBackend]:
    """Return the (primary, direct) backends, creating defaults on first use."""
    global _primary, _direct
    if _primary is None:
        _primary = PipelineStatusBackend()
    if _direct is None:
        _direct = DirectStatusBackend()
    return _primary, _direct


def set_backends(primary: StatusBackend | None = None, direct: StatusBackend | None = None) -> None:
    """Override one or both backends (useful for tests)."""
    global _primary, _direct
    if primary is not None:
        _primary = primary
    if direct is not None:
        _direct = direct


def reset_backends() -> None:
    """Reset to default backends."""
    global _primary, _direct
    _primary = None
    _direct = None
