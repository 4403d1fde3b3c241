import asyncio
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from core.checking.item_checker import ItemChecker  # noqa: E402
from core.marking import Marker  # noqa: E402
from core.models.item import Item  # noqa: E402
from core.models.outcome import ProbeOutcome  # noqa: E402
from core.models.result import Result  # noqa: E402
from core.models.run_state import RunState, RunSummary  # noqa: E402
from core.notifications.base import Notifier  # noqa: E402
from core.probe.base import Prober, classify_status  # noqa: E402


class FakeProber(Prober):
    """Scripted prober: outcomes are queued per (url, method)."""

    def __init__(self, default: Optional[Callable[[str, str], ProbeOutcome]] = None) -> None:
        self.scripts: Dict[Tuple[str, str], List[ProbeOutcome]] = {}
        self.calls: List[Tuple[str, str, float]] = []
        self.default = default or (lambda url, method: classify_status(method, 200))
        self.gate: Optional[asyncio.Event] = None
        self.in_flight = 0
        self.max_in_flight = 0

    def script(self, url: str, method: str, *outcomes: ProbeOutcome) -> None:
        self.scripts.setdefault((url, method), []).extend(outcomes)

    def methods_for(self, url: str) -> List[str]:
        return [method for called_url, method, _ in self.calls if called_url == url]

    async def probe(self, url: str, method: str, timeout: float) -> ProbeOutcome:
        self.calls.append((url, method, timeout))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.gate is not None:
                await self.gate.wait()
            else:
                await asyncio.sleep(0)
        finally:
            self.in_flight -= 1

        queued = self.scripts.get((url, method))
        if queued:
            return queued.pop(0) if len(queued) > 1 else queued[0]
        return self.default(url, method)


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.started: List[int] = []
        self.results: List[Result] = []
        self.snapshots: List[Tuple[int, int, int, int]] = []
        self.admitted: List[int] = []
        self.summaries: List[RunSummary] = []
        self.trigger_states: List[bool] = []

    def on_run_started(self, state: RunState) -> None:
        self.started.append(state.total)

    def on_items_admitted(self, count: int, state: RunState) -> None:
        self.admitted.append(count)

    def on_result(self, result: Result, state: RunState) -> None:
        self.results.append(result)
        self.snapshots.append((state.checked, state.total, state.active, len(state.queue)))

    def on_run_finished(self, summary: RunSummary) -> None:
        self.summaries.append(summary)

    def on_trigger_state(self, enabled: bool) -> None:
        self.trigger_states.append(enabled)


class RecordingMarker(Marker):
    def __init__(self) -> None:
        self.resets = 0
        self.marked: List[Tuple[Item, Result]] = []

    def reset(self) -> None:
        self.resets += 1

    def mark(self, item: Item, result: Result) -> None:
        self.marked.append((item, result))


@pytest.fixture
def prober() -> FakeProber:
    return FakeProber()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def marker() -> RecordingMarker:
    return RecordingMarker()


@pytest.fixture
def checker_factory(prober):
    def _factory(max_retries: int = 1, retry_delay: float = 0.0, timeout: float = 10.0) -> ItemChecker:
        return ItemChecker(prober, timeout=timeout, max_retries=max_retries, retry_delay=retry_delay)

    return _factory


@pytest.fixture
def items_factory():
    def _factory(count: int, prefix: str = "https://example.com/page") -> List[Item]:
        return [Item(url=f"{prefix}{i}") for i in range(count)]

    return _factory
