"""Quick-filter component and its fixture (the test-side view of it)."""

from __future__ import annotations

from typing import Any, Callable

from fake_async.application.harness import FakeAsyncHarness

from .data import generate_rows
from .grid import GridModel


class QuickFilterComponent:
    """Shows a grid of rows and how many of them pass the quick filter."""

    def __init__(self, row_factory: Callable[[], list[dict[str, Any]]] = generate_rows) -> None:
        self.displayed_rows = 0
        self.quick_filter_text = ""
        self.row_data: list[dict[str, Any]] | None = None
        self.grid: GridModel | None = None
        self._row_factory = row_factory

    def on_init(self) -> None:
        self.row_data = self._row_factory()

    def on_model_updated(self, displayed_row_count: int) -> None:
        self.displayed_rows = displayed_row_count

    def render(self) -> str:
        return f"Number of rows: {self.displayed_rows}"


class ComponentFixture:
    """Drives change detection for one QuickFilterComponent.

    Manual mode renders only on detect_changes(). Auto mode also renders
    after every scheduler drain step and whenever pending work settles.
    """

    def __init__(self, component: QuickFilterComponent, harness: FakeAsyncHarness) -> None:
        self.component = component
        self.harness = harness
        self.rendered = ""
        self.filter_input_value = ""
        self._initialized = False
        self._auto_detect = False
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def auto_detect(self) -> bool:
        return self._auto_detect

    def detect_changes(self) -> None:
        component = self.component
        if not self._initialized:
            self._initialized = True
            component.on_init()
            grid = GridModel(self.harness.seams, self.harness.pending_work)
            grid.on_model_updated(component.on_model_updated)
            component.grid = grid
            grid.set_row_data(component.row_data)

        grid = component.grid
        if grid is not None and grid.quick_filter_text != component.quick_filter_text.strip():
            grid.set_quick_filter(component.quick_filter_text)

        self.rendered = component.render()

    def auto_detect_changes(self, enabled: bool = True) -> None:
        if enabled == self._auto_detect:
            return
        self._auto_detect = enabled
        if not enabled:
            self._unsubscribe_all()
            return

        self._unsubscribers.append(self.harness.on_drain_step_rendered(self.detect_changes))
        self._unsubscribers.append(self.harness.pending_work.add_listener(self.detect_changes))
        self.detect_changes()

    def type_quick_filter(self, text: str) -> None:
        """Simulate typing into the filter box and firing its input event."""
        self.filter_input_value = text
        # two-way binding writes the component property on input
        self.component.quick_filter_text = text
        if self._auto_detect:
            self.detect_changes()

    async def when_stable(self) -> None:
        await self.harness.when_stable()

    def destroy(self) -> None:
        self._unsubscribe_all()
        self._auto_detect = False

    def _unsubscribe_all(self) -> None:
        while self._unsubscribers:
            self._unsubscribers.pop()()


def create_component(
    harness: FakeAsyncHarness,
    row_factory: Callable[[], list[dict[str, Any]]] = generate_rows,
) -> ComponentFixture:
    return ComponentFixture(QuickFilterComponent(row_factory), harness)
