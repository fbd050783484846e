"""
Unit tests for slot placement and grid projection.

Rules:
- a movie covers ceil(duration / 15) slots: one start cell, the rest continuations
- slots past 23:45 continue on the next date of the week, never past Sunday
- movies are written in (date, time) order; a later write wins a shared slot
- projection only re-indexes; rows always match the visible window length
"""

import unittest
from datetime import date

from cineplanner.config import ScheduleConfig
from cineplanner.grid import (
    Continuation,
    build_week_schedule,
    cell_movie,
    place_events,
    project_grid,
    span_slots,
)
from cineplanner.model import Movie
from cineplanner.timegrid import all_day_slots, visible_slots
from cineplanner.weeks import week_dates

HALLS = ("Zaal 1", "Zaal 2")
WEEK = week_dates(date(2024, 6, 10))


def _movie(movie_id: str, time: str, duration: int, day: str = "2024-06-10", hall: str = "Zaal 1") -> Movie:
    return Movie(id=movie_id, title=f"Movie {movie_id}", date=day, time=time, duration=duration, hall=hall)


def _occupied(grid, movie: Movie) -> list[tuple[str, int, bool]]:
    out = []
    for day, row in grid[movie.hall].items():
        for i, cell in enumerate(row):
            if cell_movie(cell) is movie:
                out.append((day, i, not isinstance(cell, Continuation)))
    return sorted(out)


class TestSpanSlots(unittest.TestCase):
    def test_span(self) -> None:
        self.assertEqual(span_slots(1), 1)
        self.assertEqual(span_slots(15), 1)
        self.assertEqual(span_slots(16), 2)
        self.assertEqual(span_slots(120), 8)
        self.assertEqual(span_slots(166), 12)


class TestPlaceEvents(unittest.TestCase):
    def setUp(self) -> None:
        self.slots = all_day_slots()

    def test_grid_shape(self) -> None:
        grid = place_events([], HALLS, WEEK, self.slots)
        self.assertEqual(set(grid), set(HALLS))
        for hall in HALLS:
            self.assertEqual(list(grid[hall]), [d.isoformat() for d in WEEK])
            for row in grid[hall].values():
                self.assertEqual(row, [None] * 96)

    def test_slot_count_and_single_start(self) -> None:
        for duration in (1, 15, 16, 45, 90, 166, 180):
            m = _movie("a", "10:00", duration)
            grid = place_events([m], HALLS, WEEK, self.slots)
            cells = _occupied(grid, m)
            self.assertEqual(len(cells), span_slots(duration))
            self.assertEqual(sum(1 for _, _, is_start in cells if is_start), 1)

    def test_start_cell_is_the_movie_itself(self) -> None:
        m = _movie("a", "20:00", 90)
        grid = place_events([m], HALLS, WEEK, self.slots)
        row = grid["Zaal 1"]["2024-06-10"]
        self.assertIs(row[80], m)
        self.assertIsInstance(row[81], Continuation)
        self.assertIs(row[81].movie, m)
        self.assertIsNone(row[86])

    def test_rollover_past_midnight(self) -> None:
        m = _movie("late", "22:30", 120)
        grid = place_events([m], HALLS, WEEK, self.slots)

        monday = grid["Zaal 1"]["2024-06-10"]
        tuesday = grid["Zaal 1"]["2024-06-11"]
        self.assertIs(monday[90], m)
        for i in range(91, 96):
            self.assertIsInstance(monday[i], Continuation)
        self.assertIsInstance(tuesday[0], Continuation)
        self.assertIsInstance(tuesday[1], Continuation)
        self.assertEqual(self.slots[0:2], ["00:00", "00:15"])
        self.assertIsNone(tuesday[2])
        self.assertEqual(len(_occupied(grid, m)), 8)

    def test_no_spill_past_last_day_of_week(self) -> None:
        m = _movie("sun", "23:30", 120, day="2024-06-16")
        grid = place_events([m], HALLS, WEEK, self.slots)
        cells = _occupied(grid, m)
        self.assertEqual(cells, [("2024-06-16", 94, True), ("2024-06-16", 95, False)])
        self.assertNotIn("2024-06-17", grid["Zaal 1"])

    def test_later_movie_overwrites_shared_slots(self) -> None:
        first = _movie("a", "20:00", 90)
        second = _movie("b", "21:00", 30)
        # input order must not matter, only (date, time)
        grid = place_events([second, first], HALLS, WEEK, self.slots)
        row = grid["Zaal 1"]["2024-06-10"]
        self.assertIs(row[80], first)
        self.assertIs(cell_movie(row[83]), first)
        self.assertIs(row[84], second)
        self.assertIs(cell_movie(row[85]), second)

    def test_previous_day_spill_is_overwritten_by_next_day_movie(self) -> None:
        late = _movie("a", "23:00", 120)
        early = _movie("b", "00:30", 15, day="2024-06-11")
        grid = place_events([early, late], HALLS, WEEK, self.slots)
        tuesday = grid["Zaal 1"]["2024-06-11"]
        self.assertIs(cell_movie(tuesday[0]), late)
        self.assertIs(tuesday[2], early)
        self.assertIs(cell_movie(tuesday[3]), late)

    def test_other_halls_are_untouched(self) -> None:
        m = _movie("a", "20:00", 90)
        grid = place_events([m], HALLS, WEEK, self.slots)
        for row in grid["Zaal 2"].values():
            self.assertEqual(row, [None] * 96)

    def test_movies_outside_week_are_skipped(self) -> None:
        m = _movie("a", "20:00", 90, day="2024-06-17")
        grid = place_events([m], HALLS, WEEK, self.slots)
        self.assertEqual(_occupied(grid, m), [])

    def test_off_grid_time_is_skipped_with_warning(self) -> None:
        bad = _movie("bad", "20:07", 90)
        good = _movie("good", "21:00", 30)
        with self.assertLogs("cineplanner.grid", level="WARNING") as logs:
            grid = place_events([bad, good], HALLS, WEEK, self.slots)
        self.assertIn("bad", "\n".join(logs.output))
        self.assertEqual(_occupied(grid, bad), [])
        self.assertIs(grid["Zaal 1"]["2024-06-10"][84], good)

    def test_unknown_hall_is_skipped_with_warning(self) -> None:
        m = _movie("x", "20:00", 90, hall="Zaal 9")
        with self.assertLogs("cineplanner.grid", level="WARNING"):
            grid = place_events([m], HALLS, WEEK, self.slots)
        self.assertNotIn("Zaal 9", grid)

    def test_accepts_iso_strings_for_week(self) -> None:
        m = _movie("a", "20:00", 90)
        grid = place_events([m], HALLS, [d.isoformat() for d in WEEK], self.slots)
        self.assertIs(grid["Zaal 1"]["2024-06-10"][80], m)


class TestProjectGrid(unittest.TestCase):
    def setUp(self) -> None:
        self.slots = all_day_slots()

    def test_projection_keeps_movie_at_visible_index(self) -> None:
        m = _movie("a", "20:00", 90)
        full = place_events([m], HALLS, WEEK, self.slots)
        vis = visible_slots(9, 23, self.slots)
        grid = project_grid(full, vis, self.slots)

        row = grid["Zaal 1"]["2024-06-10"]
        self.assertEqual(len(row), 56)
        self.assertIs(row[vis.index("20:00")], m)
        self.assertIs(cell_movie(row[vis.index("21:15")]), m)
        self.assertIsNone(row[vis.index("21:30")])

    def test_projection_excluding_movie_is_empty(self) -> None:
        m = _movie("night", "02:00", 60)
        full = place_events([m], HALLS, WEEK, self.slots)
        grid = project_grid(full, visible_slots(9, 23, self.slots), self.slots)
        self.assertEqual(grid["Zaal 1"]["2024-06-10"], [None] * 56)

    def test_row_lengths_match_window(self) -> None:
        movies = [_movie(str(i), f"{h:02d}:00", 150, day=d.isoformat()) for i, (h, d) in enumerate(zip(range(8, 23, 2), WEEK))]
        full = place_events(movies, HALLS, WEEK, self.slots)
        for start, end in [(0, 24), (9, 23), (12, 13), (22, 24)]:
            vis = visible_slots(start, end, self.slots)
            grid = project_grid(full, vis, self.slots)
            for hall in HALLS:
                for row in grid[hall].values():
                    self.assertEqual(len(row), len(vis))

    def test_build_week_schedule_uses_config_window(self) -> None:
        m = _movie("a", "10:00", 30, hall="Zaal 2")
        config = ScheduleConfig(halls=HALLS, start_hour=10, end_hour=12)
        grid = build_week_schedule([m], config, WEEK)
        row = grid["Zaal 2"]["2024-06-10"]
        self.assertEqual(len(row), 8)
        self.assertIs(row[0], m)
        self.assertIsInstance(row[1], Continuation)


if __name__ == "__main__":
    unittest.main()
