"""SubscriberRegistry 单元测试。"""

import threading

from server_list.modules.catalog.application.subscribers import SubscriberRegistry


def test_notify_invokes_each_callback_once_in_order():
    registry = SubscriberRegistry()
    calls: list[int] = []
    for index in range(3):
        registry.add(lambda index=index: calls.append(index))

    failures = registry.notify()

    assert calls == [0, 1, 2]
    assert failures == 0


def test_notify_counts_failures_and_keeps_going():
    registry = SubscriberRegistry()
    calls: list[str] = []

    def broken() -> None:
        raise RuntimeError("boom")

    registry.add(broken)
    registry.add(lambda: calls.append("ok"))
    registry.add(broken)

    assert registry.notify() == 2
    assert calls == ["ok"]


def test_callback_added_during_notify_runs_next_time():
    registry = SubscriberRegistry()
    calls: list[str] = []

    def late() -> None:
        calls.append("late")

    def first() -> None:
        calls.append("first")
        if len(registry) == 1:
            registry.add(late)

    registry.add(first)
    registry.notify()
    assert calls == ["first"]

    registry.notify()
    assert calls == ["first", "first", "late"]


def test_concurrent_adds_are_not_lost():
    registry = SubscriberRegistry()
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        for _ in range(100):
            registry.add(lambda: None)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == 800
