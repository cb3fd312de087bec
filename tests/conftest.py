import pytest

from crdtkit import LWWRegister


@pytest.fixture(autouse=True)
def restore_register_thresholds():
    """Keep process-wide register thresholds from leaking between tests."""
    stale = LWWRegister.STALE_THRESHOLD_MS
    window = LWWRegister.COUNTER_WINDOW_MS
    yield
    LWWRegister.STALE_THRESHOLD_MS = stale
    LWWRegister.COUNTER_WINDOW_MS = window
