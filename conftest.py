"""Lets pytest drive the suite's results-recording test functions."""

import pytest

from test_neural_hand import TestResults


@pytest.fixture
def results():
    recorder = TestResults()
    yield recorder
    failed = [t for t in recorder.tests if not t["passed"]]
    assert not failed, "; ".join(f"{t['name']}: {t['details']}" for t in failed)
