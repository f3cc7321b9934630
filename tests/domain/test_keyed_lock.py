"""Unit tests for KeyedLock."""

import threading
import time

from stockflow.domain.service.keyed_lock import KeyedLock


class TestKeyedLock:

    def test_same_key_is_exclusive(self):
        locks = KeyedLock()
        inside = 0
        peak = 0
        guard = threading.Lock()

        def work():
            nonlocal inside, peak
            with locks.hold((1, 1)):
                with guard:
                    inside += 1
                    peak = max(peak, inside)
                time.sleep(0.01)
                with guard:
                    inside -= 1

        threads = [threading.Thread(target=work) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert peak == 1

    def test_different_keys_do_not_block(self):
        locks = KeyedLock()
        entered = threading.Event()

        def other():
            with locks.hold((2, 1)):
                entered.set()

        with locks.hold((1, 1)):
            t = threading.Thread(target=other)
            t.start()
            assert entered.wait(timeout=1)
        t.join()

    def test_released_after_error(self):
        locks = KeyedLock()
        try:
            with locks.hold("k"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        with locks.hold("k"):
            pass
