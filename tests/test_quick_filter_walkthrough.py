from __future__ import annotations

import unittest

from demo.component import ComponentFixture, create_component
from demo.data import count_country, generate_rows
from fake_async.application.harness import FakeAsyncHarness

TOTAL_ROWS = len(generate_rows())
GERMANY_ROWS = count_country(generate_rows(), "Germany")


class _WalkthroughAssertions:
    fixture: ComponentFixture

    def assert_state(self, *, grid_rows: int, displayed_rows: int, template_rows: int) -> None:
        component = self.fixture.component
        self.assertIsNotNone(component.grid)
        self.assertEqual(component.grid.displayed_row_count(), grid_rows)
        self.assertEqual(component.displayed_rows, displayed_rows, "component.displayed_rows")
        self.assertEqual(self.fixture.rendered, f"Number of rows: {template_rows}")


class SampleDataTests(unittest.TestCase):
    def test_rows_are_deterministic(self) -> None:
        self.assertEqual(generate_rows(), generate_rows())
        self.assertEqual(TOTAL_ROWS, 1000)
        self.assertGreater(GERMANY_ROWS, 0)
        self.assertLess(GERMANY_ROWS, TOTAL_ROWS)


class FakeAsyncWalkthroughTests(_WalkthroughAssertions, unittest.TestCase):
    def setUp(self) -> None:
        self.harness = FakeAsyncHarness()
        self.fixture = create_component(self.harness)

    def tearDown(self) -> None:
        self.fixture.destroy()

    def test_filter_rows_with_manual_change_detection(self) -> None:
        with self.harness.fake_async():
            self.assertIsNone(self.fixture.component.grid)

            # first change detection creates the grid; its callback is still queued
            self.fixture.detect_changes()
            self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=0, template_rows=0)

            self.harness.flush()
            self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=TOTAL_ROWS, template_rows=0)

            self.fixture.detect_changes()
            self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=TOTAL_ROWS, template_rows=TOTAL_ROWS)

            self.fixture.type_quick_filter("Germany")
            self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=TOTAL_ROWS, template_rows=TOTAL_ROWS)

            self.fixture.detect_changes()
            self.assert_state(grid_rows=GERMANY_ROWS, displayed_rows=TOTAL_ROWS, template_rows=TOTAL_ROWS)

            self.harness.flush()
            self.assert_state(grid_rows=GERMANY_ROWS, displayed_rows=GERMANY_ROWS, template_rows=TOTAL_ROWS)

            self.fixture.detect_changes()
            self.assert_state(grid_rows=GERMANY_ROWS, displayed_rows=GERMANY_ROWS, template_rows=GERMANY_ROWS)

        self.assertEqual(self.harness.scheduler.macrotasks.pending_count, 0)
        self.assertTrue(self.harness.pending_work.is_stable)

    def test_filter_rows_with_auto_change_detection(self) -> None:
        with self.harness.fake_async():
            self.fixture.auto_detect_changes()
            self.harness.flush()
            self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=TOTAL_ROWS, template_rows=TOTAL_ROWS)

            self.fixture.type_quick_filter("Germany")
            self.harness.flush()
            self.assert_state(grid_rows=GERMANY_ROWS, displayed_rows=GERMANY_ROWS, template_rows=GERMANY_ROWS)

    def test_tick_zero_delivers_model_update(self) -> None:
        with self.harness.fake_async():
            self.fixture.detect_changes()
            self.harness.tick(0)
            self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=TOTAL_ROWS, template_rows=0)

    def test_leaving_scope_with_undelivered_update_reports_leak(self) -> None:
        with self.assertLogs("fake_async.application.scope", level="WARNING"):
            with self.harness.fake_async():
                self.fixture.detect_changes()

        report = self.harness.scheduler.describe_state()
        self.assertEqual(report.pending_macrotasks, 0)
        self.assertEqual(self.fixture.component.displayed_rows, 0)


class AsyncWalkthroughTests(_WalkthroughAssertions, unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.harness = FakeAsyncHarness()
        self.fixture = create_component(self.harness)

    def tearDown(self) -> None:
        self.fixture.destroy()

    async def test_filter_rows_waiting_for_stability(self) -> None:
        self.assertIsNone(self.fixture.component.grid)
        self.fixture.detect_changes()
        self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=0, template_rows=0)

        await self.fixture.when_stable()
        self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=TOTAL_ROWS, template_rows=0)

        self.fixture.detect_changes()
        self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=TOTAL_ROWS, template_rows=TOTAL_ROWS)

        self.fixture.type_quick_filter("Germany")
        self.fixture.detect_changes()
        self.assert_state(grid_rows=GERMANY_ROWS, displayed_rows=TOTAL_ROWS, template_rows=TOTAL_ROWS)

        await self.fixture.when_stable()
        self.assert_state(grid_rows=GERMANY_ROWS, displayed_rows=GERMANY_ROWS, template_rows=TOTAL_ROWS)

        self.fixture.detect_changes()
        self.assert_state(grid_rows=GERMANY_ROWS, displayed_rows=GERMANY_ROWS, template_rows=GERMANY_ROWS)

    async def test_filter_rows_waiting_for_stability_with_auto_detect(self) -> None:
        self.assertIsNone(self.fixture.component.grid)
        self.fixture.auto_detect_changes()
        self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=0, template_rows=0)

        await self.fixture.when_stable()
        self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=TOTAL_ROWS, template_rows=TOTAL_ROWS)

        self.fixture.type_quick_filter("Germany")
        self.assert_state(grid_rows=GERMANY_ROWS, displayed_rows=TOTAL_ROWS, template_rows=TOTAL_ROWS)

        await self.fixture.when_stable()
        self.assert_state(grid_rows=GERMANY_ROWS, displayed_rows=GERMANY_ROWS, template_rows=GERMANY_ROWS)

    async def test_auto_detect_short_form(self) -> None:
        self.fixture.auto_detect_changes()
        await self.fixture.when_stable()
        self.assert_state(grid_rows=TOTAL_ROWS, displayed_rows=TOTAL_ROWS, template_rows=TOTAL_ROWS)

        self.fixture.type_quick_filter("Germany")
        await self.fixture.when_stable()
        self.assert_state(grid_rows=GERMANY_ROWS, displayed_rows=GERMANY_ROWS, template_rows=GERMANY_ROWS)


if __name__ == "__main__":
    unittest.main()
