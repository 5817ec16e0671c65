# =============================================================================
# tests/test_subscription.py - Subscription handle
# =============================================================================

import threading

from entregas.utils.subscription import Subscription


def test_release_runs_exactly_once():
    calls = []
    sub = Subscription(lambda: calls.append(1), name="test")

    assert sub.active
    assert sub.unsubscribe() is True
    assert sub.unsubscribe() is False
    assert calls == [1]
    assert not sub.active


def test_concurrent_unsubscribe_releases_once():
    calls = []
    sub = Subscription(lambda: calls.append(1))
    results = []
    threads = [
        threading.Thread(target=lambda: results.append(sub.unsubscribe()))
        for _ in range(8)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert calls == [1]
    assert results.count(True) == 1


def test_repr_shows_state():
    sub = Subscription(lambda: None, name="auth-state")

    assert "active" in repr(sub)
    sub.unsubscribe()
    assert "released" in repr(sub)
