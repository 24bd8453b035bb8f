"""Tests for RunControl and the render pool."""

import time

import pytest

from bside.errors import ParameterError, RenderCancelled
from bside.scheduler import RenderPool, RunControl


def _echo(value, control):
    return value, control


def _fail(control):
    raise ValueError("broken job")


def _spin(control):
    while True:
        control.check()
        time.sleep(0.01)


@pytest.fixture
def pool():
    render_pool = RenderPool(max_workers=1, timeout=5.0)
    yield render_pool
    render_pool.shutdown()


class TestRunControl:
    """Test cases for RunControl."""

    def test_fresh_control_passes(self):
        control = RunControl()
        control.check()
        assert not control.should_stop()
        assert not control.expired()

    def test_stop(self):
        control = RunControl()
        control.stop()
        assert control.should_stop()
        with pytest.raises(RenderCancelled):
            control.check()

    def test_past_deadline(self):
        control = RunControl(deadline=time.monotonic() - 1.0)
        assert control.expired()
        with pytest.raises(RenderCancelled):
            control.check()

    @pytest.mark.parametrize("seconds", [None, 0, -1])
    def test_without_timeout(self, seconds):
        assert RunControl.with_timeout(seconds).deadline is None


class TestRenderPool:
    """Test cases for RenderPool."""

    def test_rejects_empty_pool(self):
        with pytest.raises(ParameterError):
            RenderPool(max_workers=0)

    def test_run_injects_control(self, pool):
        value, control = pool.run(_echo, 7)
        assert value == 7
        assert isinstance(control, RunControl)
        assert control.deadline is not None

    def test_stats(self, pool):
        pool.run(_echo, 1)
        with pytest.raises(ValueError):
            pool.run(_fail)
        stats = pool.stats()
        assert stats["submitted"] == 2
        assert stats["completed"] == 1
        assert stats["failed"] == 1
        assert stats["running"] == 0
        assert stats["max_workers"] == 1

    def test_deadline_cancels_job(self):
        render_pool = RenderPool(max_workers=1, timeout=0.05)
        try:
            with pytest.raises(RenderCancelled):
                render_pool.run(_spin)
            assert render_pool.stats()["cancelled"] == 1
        finally:
            render_pool.shutdown()
