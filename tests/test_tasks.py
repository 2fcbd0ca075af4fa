"""Tests for background execution and busy gates."""

import threading

import pytest

from maccleaner.tasks import BackgroundRunner, BusyError, TaskGate, TaskState, get_default_runner


class TestTaskGate:
    def test_starts_idle(self):
        gate = TaskGate("test")
        assert gate.state == TaskState.IDLE
        assert not gate.is_busy

    def test_acquire_and_release(self):
        gate = TaskGate("test")
        gate.acquire()
        assert gate.state == TaskState.RUNNING
        gate.release()
        assert gate.state == TaskState.IDLE

    def test_second_acquire_is_rejected(self):
        gate = TaskGate("scanner")
        gate.acquire()
        with pytest.raises(BusyError, match="scanner is already running"):
            gate.acquire()
        assert gate.is_busy

    def test_hold_releases_on_exception(self):
        gate = TaskGate("test")
        with pytest.raises(ValueError):
            with gate.hold():
                assert gate.is_busy
                raise ValueError("boom")
        assert not gate.is_busy


class TestBackgroundRunner:
    def test_returns_result_and_releases_gate(self):
        gate = TaskGate("test")
        with BackgroundRunner(max_workers=1) as runner:
            future = runner.submit(gate, lambda a, b: a + b, 2, b=3)
            assert future.result(timeout=10) == 5
        assert not gate.is_busy

    def test_exception_is_delivered_through_future(self):
        gate = TaskGate("test")

        def fail():
            raise RuntimeError("worker failed")

        with BackgroundRunner(max_workers=1) as runner:
            future = runner.submit(gate, fail)
            with pytest.raises(RuntimeError, match="worker failed"):
                future.result(timeout=10)
        assert not gate.is_busy

    def test_rejects_instead_of_queueing(self):
        gate = TaskGate("test")
        release = threading.Event()
        calls = []

        def work():
            calls.append(1)
            release.wait(timeout=10)

        with BackgroundRunner(max_workers=2) as runner:
            first = runner.submit(gate, work)
            with pytest.raises(BusyError):
                runner.submit(gate, work)
            release.set()
            first.result(timeout=10)

            runner.submit(gate, work).result(timeout=10)

        assert len(calls) == 2

    def test_independent_gates_run_in_parallel(self):
        both_running = threading.Barrier(2, timeout=10)

        with BackgroundRunner(max_workers=2) as runner:
            a = runner.submit(TaskGate("a"), both_running.wait)
            b = runner.submit(TaskGate("b"), both_running.wait)
            a.result(timeout=10)
            b.result(timeout=10)

    def test_submit_after_shutdown_releases_gate(self):
        gate = TaskGate("test")
        runner = BackgroundRunner(max_workers=1)
        runner.shutdown()
        with pytest.raises(RuntimeError):
            runner.submit(gate, lambda: None)
        assert not gate.is_busy

    def test_default_runner_is_shared(self):
        assert get_default_runner() is get_default_runner()
