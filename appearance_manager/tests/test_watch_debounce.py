import json
import time
from pathlib import Path
from types import MethodType

from appearance_manager.enginelib.state_store import MemoryStateStore
from appearance_manager.service import AppearanceConfig, AppearanceService


class FakeObserver:
    def __init__(self):
        self.handler = None
        self.path = None

    def schedule(self, handler, path, recursive):
        self.handler = handler
        self.path = path

    def start(self):
        return None

    def stop(self):
        return None

    def join(self):
        return None


class FakeTimer:
    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.cancelled = False

    def start(self):
        return None

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.callback()


def create_service(tmp_path: Path) -> AppearanceService:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    with open(data_dir / "themes.json", "w", encoding="utf-8") as handle:
        json.dump([{"id": "t", "title": "Theme"}], handle)
    config = AppearanceConfig(
        data_dir=data_dir,
        state_file=tmp_path / "state.json",
        theme_sources=["themes"],
        pencil_sources=["pencils"],
    )
    return AppearanceService(config, state=MemoryStateStore())


def test_watch_debounces_multiple_events(tmp_path):
    service = create_service(tmp_path)
    observer = FakeObserver()
    timers = []

    def timer_factory(interval, callback):
        timer = FakeTimer(interval, callback)
        timers.append(timer)
        return timer

    calls = []

    def fake_reload(self):
        calls.append("reload")
        return {}

    service.reload = MethodType(fake_reload, service)

    service.start_watcher(debounce_seconds=0.01, observer_factory=lambda: observer, timer_factory=timer_factory)
    time.sleep(0.05)
    assert observer.handler is not None
    assert observer.path == str(tmp_path / "data")

    event = type("Evt", (), {"is_directory": False})
    observer.handler.on_any_event(event)
    observer.handler.on_any_event(event)

    assert timers, "expected timer creation"
    assert timers[0].cancelled
    timers[-1].fire()

    service.stop_watcher()

    assert calls.count("reload") == 1


def test_directory_events_are_ignored(tmp_path):
    service = create_service(tmp_path)
    observer = FakeObserver()
    timers = []

    service.start_watcher(
        observer_factory=lambda: observer,
        timer_factory=lambda interval, callback: timers.append(callback),
    )
    time.sleep(0.05)
    observer.handler.on_any_event(type("Evt", (), {"is_directory": True}))
    service.stop_watcher()

    assert timers == []


def test_stop_cancels_pending_reload(tmp_path):
    service = create_service(tmp_path)
    observer = FakeObserver()
    timers = []

    def timer_factory(interval, callback):
        timer = FakeTimer(interval, callback)
        timers.append(timer)
        return timer

    calls = []
    service.reload = MethodType(lambda self: calls.append("reload"), service)

    service.start_watcher(observer_factory=lambda: observer, timer_factory=timer_factory)
    time.sleep(0.05)
    observer.handler.on_any_event(type("Evt", (), {"is_directory": False}))
    service.stop_watcher()

    assert len(timers) == 1
    assert timers[0].cancelled
    timers[0].fire()
    assert calls == []


def test_watcher_creates_missing_data_dir(tmp_path):
    service = create_service(tmp_path)
    service.config.data_dir = tmp_path / "later" / "data"
    observer = FakeObserver()

    service.start_watcher(observer_factory=lambda: observer)
    time.sleep(0.05)
    service.stop_watcher()

    assert service.config.data_dir.is_dir()
    assert observer.path == str(tmp_path / "later" / "data")
