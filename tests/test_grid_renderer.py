from datetime import date

from anki_heatmap.services.calendar_service import GridLayout
from anki_heatmap.services.calendar_service import build_date_window
from anki_heatmap.services.calendar_service import empty_calendar
from anki_heatmap.services.colour_service import BACKGROUND
from anki_heatmap.services.colour_service import EMPTY
from anki_heatmap.services.grid_renderer import JsonGridRenderer
from anki_heatmap.services.grid_renderer import SvgGridRenderer
from anki_heatmap.services.grid_renderer import build_grid


def test_grid_stops_last_column_at_day_of_week() -> None:
    layout = GridLayout(weeks=7, day_of_week=3)
    calendar = empty_calendar(build_date_window(date(2024, 3, 13), layout.window_days))

    columns = build_grid(calendar, layout, "blue")

    assert len(columns) == 7
    assert [len(column.cells) for column in columns] == [7, 7, 7, 7, 7, 7, 4]
    assert columns[-1].cells[-1].day == date(2024, 3, 13)
    assert columns[0].cells[0].day == date(2024, 1, 28)


def test_grid_pads_missing_days_with_empty_cells() -> None:
    layout = GridLayout(weeks=2, day_of_week=6)
    calendar = {date(2024, 3, 10): 120}

    columns = build_grid(calendar, layout, "red")

    first, *rest = [cell for column in columns for cell in column.cells]
    assert first.day == date(2024, 3, 10)
    assert first.level == 4
    assert first.colour == "#ff2e2e"
    assert len(rest) == 13
    assert all(cell.day is None and cell.count == 0 for cell in rest)
    assert all(cell.colour == EMPTY.light for cell in rest)


def test_json_renderer_reports_totals_and_scheme() -> None:
    layout = GridLayout(weeks=1, day_of_week=2)
    calendar = {date(2024, 3, 10): 3, date(2024, 3, 11): 0, date(2024, 3, 12): 40}

    payload = JsonGridRenderer("Purple", dark=True).render(calendar, layout)

    assert payload.colour_scheme == "purple"
    assert payload.total == 43
    assert payload.background == BACKGROUND.dark
    assert [cell.level for cell in payload.columns[0].cells] == [1, 0, 2]


def test_svg_renderer_draws_one_rect_per_cell() -> None:
    layout = GridLayout(weeks=2, day_of_week=0)
    calendar = {date(2024, 3, 3): 0, date(2024, 3, 4): 25}

    svg = SvgGridRenderer("green").render(calendar, layout)

    assert svg.startswith("<svg")
    assert svg.count('rx="3"') == 8
    assert "<title>2024-03-04: 25</title>" in svg
    assert 'fill="#ccff99"' in svg


def test_svg_error_escapes_message() -> None:
    svg = SvgGridRenderer("blue").render_error("bad <url>")

    assert "Anki Review Graph" in svg
    assert "Error: bad &lt;url&gt;" in svg
