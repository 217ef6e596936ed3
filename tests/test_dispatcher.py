import threading
import time
import unittest

from core.dispatcher import RateLimitedDispatcher


class TestRateLimitedDispatcher(unittest.TestCase):
    def test_never_exceeds_max_concurrent(self):
        lock = threading.Lock()
        state = {"active": 0, "peak": 0}

        def invoke(_):
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            time.sleep(0.03)
            with lock:
                state["active"] -= 1

        report = RateLimitedDispatcher(max_concurrent=2, min_interval_ms=0).run_all(range(8), invoke)

        self.assertEqual(report.succeeded, 8)
        self.assertLessEqual(state["peak"], 2)
        self.assertEqual(state["active"], 0)

    def test_min_interval_with_fake_clock(self):
        now = [100.0]
        sleeps = []

        def fake_sleep(seconds):
            sleeps.append(round(seconds, 6))
            now[0] += seconds

        dispatcher = RateLimitedDispatcher(max_concurrent=1, min_interval_ms=500,
                                           clock=lambda: now[0], sleep=fake_sleep)
        dispatcher.run_all(["a", "b", "c"], lambda _: None)

        self.assertEqual(sleeps, [0.5, 0.5])

    def test_starts_are_spaced_in_real_time(self):
        starts = []
        lock = threading.Lock()

        def invoke(item):
            with lock:
                starts.append(time.monotonic())

        RateLimitedDispatcher(max_concurrent=4, min_interval_ms=40).run_all(range(5), invoke)

        starts.sort()
        gaps = [b - a for a, b in zip(starts, starts[1:])]
        self.assertEqual(len(gaps), 4)
        for gap in gaps:
            self.assertGreaterEqual(gap, 0.04 - 0.01)

    def test_admission_follows_supplied_order(self):
        seen = []
        RateLimitedDispatcher(max_concurrent=1, min_interval_ms=0).run_all(list("abcdef"), seen.append)
        self.assertEqual(seen, list("abcdef"))

    def test_failure_does_not_block_siblings(self):
        seen = []
        lock = threading.Lock()

        def invoke(item):
            with lock:
                seen.append(item)
            if item == 2:
                raise RuntimeError("provider down")

        report = RateLimitedDispatcher(max_concurrent=2, min_interval_ms=0).run_all(range(5), invoke)

        self.assertEqual(sorted(seen), [0, 1, 2, 3, 4])
        self.assertEqual(report.succeeded, 4)
        self.assertEqual(report.failed, 1)
        self.assertEqual(report.total, 5)

    def test_empty_input(self):
        report = RateLimitedDispatcher().run_all([], lambda _: None)
        self.assertEqual(report.total, 0)

    def test_invalid_concurrency(self):
        with self.assertRaises(ValueError):
            RateLimitedDispatcher(max_concurrent=0)

    def test_negative_interval_is_clamped(self):
        self.assertEqual(RateLimitedDispatcher(min_interval_ms=-5).min_interval, 0.0)


if __name__ == "__main__":
    unittest.main()
