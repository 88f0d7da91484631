from collections.abc import Mapping
from datetime import date
from html import escape
from typing import Protocol
from typing import TypeVar

from anki_heatmap.api.schemas.heatmap import GridCell
from anki_heatmap.api.schemas.heatmap import GridColumn
from anki_heatmap.api.schemas.heatmap import WidgetPayload
from anki_heatmap.services.calendar_service import GridLayout
from anki_heatmap.services.colour_service import BACKGROUND
from anki_heatmap.services.colour_service import TEXT_PRIMARY
from anki_heatmap.services.colour_service import colour_for_count
from anki_heatmap.services.colour_service import resolve_colour_scheme
from anki_heatmap.services.colour_service import review_bucket


WIDGET_TITLE = "Anki Review Graph"

RenderT = TypeVar("RenderT", covariant=True)


class GridRenderer(Protocol[RenderT]):
    """Turns a dense calendar into a drawable widget."""

    def render(self, calendar: Mapping[date, int], layout: GridLayout) -> RenderT: ...

    def render_error(self, message: str) -> RenderT: ...


def build_grid(
    calendar: Mapping[date, int],
    layout: GridLayout,
    scheme: str,
    mode: str = "buckets",
    dark: bool = False,
) -> list[GridColumn]:
    """Lay the calendar out as week columns of up to seven cells.

    The last column stops at `layout.day_of_week`.
    """

    entries = list(calendar.items())
    columns: list[GridColumn] = []

    for column in range(layout.weeks):
        cells: list[GridCell] = []
        for row in range(7):
            index = column * 7 + row
            day, count = entries[index] if index < len(entries) else (None, 0)
            cells.append(
                GridCell(
                    day=day,
                    count=count,
                    level=review_bucket(count).level,
                    colour=colour_for_count(count, scheme, mode=mode, dark=dark),
                )
            )
            if column == layout.weeks - 1 and row == layout.day_of_week:
                break
        columns.append(GridColumn(cells=cells))

    return columns


class JsonGridRenderer:
    def __init__(self, scheme: str, mode: str = "buckets", dark: bool = False) -> None:
        self.scheme = resolve_colour_scheme(scheme)
        self.mode = mode
        self.dark = dark

    def render(self, calendar: Mapping[date, int], layout: GridLayout) -> WidgetPayload:
        columns = build_grid(calendar, layout, self.scheme, mode=self.mode, dark=self.dark)
        return WidgetPayload(
            title=WIDGET_TITLE,
            background=BACKGROUND.resolve(self.dark),
            text_colour=TEXT_PRIMARY.resolve(self.dark),
            colour_scheme=self.scheme,
            weeks=layout.weeks,
            day_of_week=layout.day_of_week,
            total=sum(cell.count for column in columns for cell in column.cells),
            columns=columns,
        )

    def render_error(self, message: str) -> WidgetPayload:
        return WidgetPayload(
            title=WIDGET_TITLE,
            background=BACKGROUND.resolve(self.dark),
            text_colour=TEXT_PRIMARY.resolve(self.dark),
            error=f"Error: {message}",
        )


class SvgGridRenderer:
    """Draws the widget as a standalone SVG document."""

    def __init__(
        self,
        scheme: str,
        mode: str = "buckets",
        dark: bool = False,
        cell_size: float = 14.2,
        cell_gap: float = 4,
        padding: float = 21,
    ) -> None:
        self.scheme = resolve_colour_scheme(scheme)
        self.mode = mode
        self.dark = dark
        self.cell_size = cell_size
        self.cell_gap = cell_gap
        self.padding = padding

    def _span(self, cells: int) -> float:
        return cells * self.cell_size + max(cells - 1, 0) * self.cell_gap

    def render(self, calendar: Mapping[date, int], layout: GridLayout) -> str:
        columns = build_grid(calendar, layout, self.scheme, mode=self.mode, dark=self.dark)
        width = self._span(layout.weeks) + 2 * self.padding
        height = self._span(7) + 2 * self.padding
        step = self.cell_size + self.cell_gap

        rects: list[str] = []
        for column_index, column in enumerate(columns):
            for row_index, cell in enumerate(column.cells):
                x = self.padding + column_index * step
                y = self.padding + row_index * step
                title = f"{cell.day.isoformat()}: {cell.count}" if cell.day else ""
                rects.append(
                    f'<rect x="{x:g}" y="{y:g}" width="{self.cell_size:g}" '
                    f'height="{self.cell_size:g}" rx="3" fill="{cell.colour}">'
                    f"<title>{escape(title)}</title></rect>"
                )

        return self._document(width, height, "\n  ".join(rects))

    def render_error(self, message: str) -> str:
        text_colour = TEXT_PRIMARY.resolve(self.dark)
        width = self._span(17) + 2 * self.padding
        height = self._span(7) + 2 * self.padding
        body = (
            f'<text x="{self.padding:g}" y="{self.padding + 14:g}" font-size="14" '
            f'font-weight="bold" fill="{text_colour}">{WIDGET_TITLE}</text>\n  '
            f'<text x="{self.padding:g}" y="{self.padding + 36:g}" font-size="14" '
            f'fill="{text_colour}">{escape(f"Error: {message}")}</text>'
        )
        return self._document(width, height, body)

    def _document(self, width: float, height: float, body: str) -> str:
        background = BACKGROUND.resolve(self.dark)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:g}" '
            f'height="{height:g}" viewBox="0 0 {width:g} {height:g}" role="img" '
            f'aria-label="{WIDGET_TITLE}">\n'
            f'  <rect width="100%" height="100%" rx="21" fill="{background}"/>\n'
            f"  {body}\n"
            "</svg>\n"
        )
