import asyncio
import logging

import pytest
from watchdog.events import (
    DirModifiedEvent,
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileMovedEvent,
    FileOpenedEvent,
)
from watchdog.observers import Observer

from catalog_display.services.broadcast import BroadcastChannel
from catalog_display.services.watcher import ImageFolderWatcher


class Counter:
    def __init__(self):
        self.calls = 0

    async def __call__(self):
        self.calls += 1


class FakeObserver:
    def __init__(self):
        self.scheduled = []
        self.started = False
        self.stopped = False
        self.joined = False

    def schedule(self, handler, path, recursive=False):
        self.scheduled.append((handler, path, recursive))

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def join(self, timeout=None):
        self.joined = True


async def _drain(seconds: float = 0.0):
    await asyncio.sleep(seconds)
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_every_raw_event_broadcasts_without_debounce(tmp_path):
    counter = Counter()
    watcher = ImageFolderWatcher(tmp_path, counter, debounce_ms=0)

    for _ in range(3):
        watcher.schedule_change()
    await _drain()

    assert counter.calls == 3


@pytest.mark.asyncio
async def test_debounce_collapses_a_burst_into_one_broadcast(tmp_path):
    counter = Counter()
    watcher = ImageFolderWatcher(tmp_path, counter, debounce_ms=20)

    for _ in range(5):
        watcher.schedule_change()
    await _drain(0.1)

    assert counter.calls == 1


@pytest.mark.asyncio
async def test_events_after_the_window_broadcast_again(tmp_path):
    counter = Counter()
    watcher = ImageFolderWatcher(tmp_path, counter, debounce_ms=10)

    watcher.schedule_change()
    await _drain(0.05)
    watcher.schedule_change()
    await _drain(0.05)

    assert counter.calls == 2


@pytest.mark.asyncio
async def test_observer_thread_events_reach_the_loop(tmp_path):
    counter = Counter()
    observer = FakeObserver()
    watcher = ImageFolderWatcher(tmp_path, counter, debounce_ms=0, observer_factory=lambda: observer)

    assert watcher.start() is True
    await asyncio.to_thread(watcher.handler.on_any_event, FileCreatedEvent(str(tmp_path / "new.png")))
    await asyncio.to_thread(watcher.handler.on_any_event, FileDeletedEvent(str(tmp_path / "old.png")))
    await _drain()

    assert counter.calls == 2
    watcher.stop()


@pytest.mark.asyncio
async def test_directory_events_are_ignored(tmp_path):
    counter = Counter()
    watcher = ImageFolderWatcher(tmp_path, counter, debounce_ms=0, observer_factory=FakeObserver)
    watcher.start()

    watcher.handler.on_any_event(DirModifiedEvent(str(tmp_path)))
    await _drain()

    assert counter.calls == 0
    watcher.stop()


@pytest.mark.asyncio
async def test_start_and_stop_manage_the_observer(tmp_path):
    observer = FakeObserver()
    watcher = ImageFolderWatcher(tmp_path, Counter(), observer_factory=lambda: observer)

    assert watcher.start() is True
    assert watcher.running
    assert observer.started
    assert observer.scheduled[0][1:] == (str(tmp_path), False)

    watcher.stop()
    assert not watcher.running
    assert observer.stopped and observer.joined


@pytest.mark.asyncio
async def test_missing_folder_leaves_watcher_idle(tmp_path):
    watcher = ImageFolderWatcher(tmp_path / "images", Counter(), observer_factory=FakeObserver)

    assert watcher.start() is False
    assert not watcher.running
    watcher.stop()


@pytest.mark.asyncio
async def test_callback_errors_are_contained(tmp_path, caplog):
    async def boom():
        raise RuntimeError("broadcast failed")

    watcher = ImageFolderWatcher(tmp_path, boom, debounce_ms=0)
    with caplog.at_level(logging.ERROR, logger="catalog_display.services.watcher"):
        watcher.schedule_change()
        await _drain()

    assert "change callback failed" in caplog.text

    counter = Counter()
    watcher.on_change = counter
    watcher.schedule_change()
    await _drain()
    assert counter.calls == 1


@pytest.mark.asyncio
async def test_watcher_drives_broadcast_channel(tmp_path):
    class Socket:
        def __init__(self):
            self.sent = []

        async def send_json(self, data):
            self.sent.append(data)

    channel = BroadcastChannel()
    socket = Socket()
    channel.connect(socket)
    watcher = ImageFolderWatcher(tmp_path, channel.broadcast_changed, debounce_ms=0)

    watcher.schedule_change()
    await _drain()

    assert socket.sent == [{"event": "update"}]


@pytest.mark.asyncio
async def test_read_events_are_not_changes(tmp_path):
    counter = Counter()
    watcher = ImageFolderWatcher(tmp_path, counter, debounce_ms=0, observer_factory=FakeObserver)
    watcher.start()
    image = str(tmp_path / "a.png")

    watcher.handler.dispatch(FileOpenedEvent(image))
    watcher.handler.dispatch(FileClosedEvent(image))
    await _drain()
    assert counter.calls == 0

    watcher.handler.dispatch(FileMovedEvent(image, str(tmp_path / "b.png")))
    await _drain()
    assert counter.calls == 1
    watcher.stop()


# The tests below run a real watchdog observer on a temporary folder.


@pytest.mark.asyncio
async def test_real_observer_ignores_reads(tmp_path):
    image = tmp_path / "a.png"
    image.write_bytes(b"png-bytes")
    counter = Counter()
    watcher = ImageFolderWatcher(tmp_path, counter, debounce_ms=50, observer_factory=Observer)

    assert watcher.start() is True
    try:
        await asyncio.sleep(0.2)
        for _ in range(3):
            assert image.read_bytes() == b"png-bytes"
        await asyncio.sleep(1.0)
    finally:
        watcher.stop()

    assert counter.calls == 0


@pytest.mark.asyncio
async def test_real_observer_debounces_create_and_delete(tmp_path):
    counter = Counter()
    watcher = ImageFolderWatcher(tmp_path, counter, debounce_ms=100, observer_factory=Observer)

    assert watcher.start() is True
    try:
        await asyncio.sleep(0.2)
        image = tmp_path / "new.png"
        image.write_bytes(b"png-bytes")
        await asyncio.sleep(1.0)
        assert counter.calls == 1

        image.unlink()
        await asyncio.sleep(1.0)
        assert counter.calls == 2
    finally:
        watcher.stop()
