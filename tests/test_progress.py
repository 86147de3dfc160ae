"""Tests for ProgressTracker."""

from __future__ import annotations

import time

from jrekit.progress import ProgressTracker


class TestProgressTracker:
    def test_basic_flow(self):
        tracker = ProgressTracker()
        tracker.start("linux-x64")
        tracker.complete("linux-x64", detail="42.0 MB")

        summary = tracker.get_summary()
        assert len(summary["steps"]) == 1
        assert summary["steps"][0]["status"] == "completed"
        assert summary["steps"][0]["detail"] == "42.0 MB"

    def test_fail(self):
        tracker = ProgressTracker()
        tracker.start("macos-arm64")
        tracker.fail("macos-arm64", "jlink failed")

        summary = tracker.get_summary()
        assert summary["steps"][0]["status"] == "failed"
        assert summary["steps"][0]["error"] == "jlink failed"
        assert tracker.failed == ["macos-arm64"]

    def test_skip_counts_as_success(self):
        tracker = ProgressTracker()
        tracker.skip("windows-arm64", "cached")

        assert tracker.get("windows-arm64").status == "skipped"
        assert tracker.results() == {"windows-arm64": True}

    def test_skip_after_start_keeps_one_step(self):
        tracker = ProgressTracker()
        tracker.start("linux-x64")
        tracker.skip("linux-x64", "12.0 MB")

        assert len(tracker.steps) == 1
        p = tracker.get("linux-x64")
        assert p.status == "skipped"
        assert p.detail == "12.0 MB"
        assert p.duration is not None
        assert tracker.results() == {"linux-x64": True}

    def test_duration(self):
        tracker = ProgressTracker()
        tracker.start("linux-arm64")
        time.sleep(0.01)
        tracker.complete("linux-arm64")

        p = tracker.steps[0]
        assert p.duration is not None
        assert p.duration >= 0.01

    def test_callback(self):
        events = []
        tracker = ProgressTracker()
        tracker.callbacks.append(lambda p: events.append((p.name, p.status)))

        tracker.start("a")
        tracker.complete("a")

        assert events == [("a", "running"), ("a", "completed")]

    def test_failing_callback_does_not_break_tracking(self):
        tracker = ProgressTracker()

        def boom(_):
            raise RuntimeError("callback bug")

        tracker.callbacks.append(boom)
        tracker.start("a")
        tracker.complete("a")
        assert tracker.get("a").status == "completed"

    def test_results_keep_order(self):
        tracker = ProgressTracker()
        for name, ok in (("one", True), ("two", False), ("three", True)):
            tracker.start(name)
            if ok:
                tracker.complete(name)
            else:
                tracker.fail(name, "boom")

        assert list(tracker.results().items()) == [("one", True), ("two", False), ("three", True)]
        summary = tracker.get_summary()
        assert summary["succeeded"] == 2
        assert summary["total"] == 3
        assert summary["total_duration"] >= 0

    def test_unknown_name_is_ignored(self):
        tracker = ProgressTracker()
        tracker.complete("never-started")
        tracker.fail("never-started", "x")
        assert tracker.steps == []
