#!/usr/bin/env python3
# chart.py

"""
Price-distribution pie chart.

``ChartRenderer`` turns the inventory into slices, labels, a legend and a
total, and draws them through a *surface*: any object offering

* ``size()`` / ``pixel_ratio()`` – logical size and device pixel ratio
* ``resize(width, height, ratio)`` – rebuild the backing buffer
* ``clear()``
* ``wedge(cx, cy, radius, start, end, fill, stroke, stroke_width)``
* ``text(x, y, text, rotation, color, size, bold)``

All coordinates are logical pixels with y pointing down, and angles are
radians measured clockwise from the positive x-axis.

``MatplotlibSurface`` renders into a matplotlib figure; the live window
embeds that figure in Tk and chart export saves it to a file.
"""

import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from babel import Locale, UnknownLocaleError, default_locale as babel_default_locale
from babel.numbers import format_currency as babel_format_currency
from matplotlib.figure import Figure
from matplotlib.patches import Wedge

from inventory import normalize_color


START_ANGLE = -math.pi / 2      # 12 o'clock
FULL_TURN = 2 * math.pi
CHART_MARGIN = 24
LABEL_RADIUS_RATIO = 0.72
DEFAULT_CHART_SIZE = 700
BASE_DPI = 96

STROKE_RGBA = (0.0, 0.0, 0.0, 0.18)
STROKE_WIDTH = 1.25
NAME_FONT_SIZE = 18
PERCENT_FONT_SIZE = 14
PERCENT_LINE_OFFSET = 18

DARK_TEXT = "#111111"
LIGHT_TEXT = "#ffffff"
LUMINANCE_THRESHOLD = 0.55

CURRENCY = "USD"
FALLBACK_LOCALE = "en_US"

NO_DATA_MESSAGE = "No data"
ZERO_TOTAL_MESSAGE = "Total price is 0"


# --------------------------------------------------------------------- #
#   Colour and number helpers
# --------------------------------------------------------------------- #
def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    h = normalize_color(color)
    return int(h[1:3], 16), int(h[3:5], 16), int(h[5:7], 16)


def _linear_channel(value: int) -> float:
    c = value / 255
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: str) -> float:
    """Perceptual brightness of ``color`` between 0 (black) and 1 (white)."""
    r, g, b = (_linear_channel(v) for v in hex_to_rgb(color))
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_color(color: str) -> str:
    """Label colour that stays legible on a ``color`` background."""
    return DARK_TEXT if relative_luminance(color) > LUMINANCE_THRESHOLD else LIGHT_TEXT


def chart_value(price) -> float:
    """Price as used in chart math: non-finite or non-numeric counts as 0."""
    try:
        value = float(price)
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def default_locale() -> str:
    """The user's numeric locale, ``en_US`` when none is configured."""
    name = babel_default_locale("LC_NUMERIC")
    if not name or name.startswith("en_US_POSIX"):
        return FALLBACK_LOCALE
    return name


def format_currency(amount, locale: Optional[str] = None) -> str:
    """
    Whole-dollar USD text in the user's locale, e.g. ``$96,000`` for
    en_US or ``96.000 $`` for de_DE.
    """
    value = round(chart_value(amount))
    try:
        loc = Locale.parse(locale or default_locale())
    except (UnknownLocaleError, ValueError):
        loc = Locale.parse(FALLBACK_LOCALE)
    pattern = re.sub(r"\.0+", "", loc.currency_formats["standard"].pattern)
    return babel_format_currency(value, CURRENCY, format=pattern, locale=loc, currency_digits=False)


def format_percent(fraction: float) -> str:
    return f"{fraction * 100:.1f}%"


# --------------------------------------------------------------------- #
#   Geometry
# --------------------------------------------------------------------- #
@dataclass
class Slice:
    item_id: str
    model: str
    color: str
    value: float
    fraction: float
    start: float
    end: float

    @property
    def sweep(self) -> float:
        return self.end - self.start

    @property
    def mid(self) -> float:
        return (self.start + self.end) / 2


@dataclass
class LegendRow:
    color: str
    model: str
    price_text: str

    @property
    def text(self) -> str:
        return f"{self.model} • {self.price_text}"


@dataclass
class ChartResult:
    total: float
    total_text: str
    slices: List[Slice] = field(default_factory=list)
    legend: List[LegendRow] = field(default_factory=list)
    notice: Optional[str] = None


def compute_slices(items) -> Tuple[float, List[Slice]]:
    """
    Split a full turn between ``items`` in proportion to their prices.

    Each slice starts at an absolute cumulative fraction of the total, so
    the slices are contiguous and the last one closes exactly at a full
    turn. Returns ``(total, slices)``; no slices when the total is <= 0.
    """
    values = [chart_value(item.price) for item in items]
    total = sum(values)
    if not items or total <= 0:
        return total, []

    slices = []
    running = 0.0
    start = START_ANGLE
    for index, (item, value) in enumerate(zip(items, values)):
        running += value
        if index == len(values) - 1:
            end = START_ANGLE + FULL_TURN
        else:
            end = START_ANGLE + (running / total) * FULL_TURN
        slices.append(Slice(
            item_id=item.id,
            model=item.model,
            color=normalize_color(item.color),
            value=value,
            fraction=value / total,
            start=start,
            end=end,
        ))
        start = end
    return total, slices


def outer_radius(width: float, height: float, margin: float = CHART_MARGIN) -> float:
    return max(min(width / 2, height / 2) - margin, 0.0)


def label_positions(cx: float, cy: float, radius: float, angle: float):
    """
    Anchor points of the two label lines of a slice.

    The name sits on the mid-angle ray at ``LABEL_RADIUS_RATIO`` of the
    radius; the percentage is ``PERCENT_LINE_OFFSET`` below it in the frame
    rotated by ``angle``.
    """
    label_radius = radius * LABEL_RADIUS_RATIO
    lx = cx + math.cos(angle) * label_radius
    ly = cy + math.sin(angle) * label_radius
    px = lx - math.sin(angle) * PERCENT_LINE_OFFSET
    py = ly + math.cos(angle) * PERCENT_LINE_OFFSET
    return (lx, ly), (px, py)


# --------------------------------------------------------------------- #
#   Renderer
# --------------------------------------------------------------------- #
class ChartRenderer:
    """
    Draws the inventory onto ``surface`` and feeds the optional ``panel``
    (``set_total``, ``show_notice``, ``hide_notice``, ``set_legend``).
    """

    def __init__(self, surface, panel=None, locale: Optional[str] = None):
        self.surface = surface
        self.panel = panel
        self.locale = locale

    def render(self, items) -> ChartResult:
        items = list(items)
        surface = self.surface

        ratio = surface.pixel_ratio() or 1.0
        width, height = surface.size()
        width = width or DEFAULT_CHART_SIZE
        height = height or DEFAULT_CHART_SIZE
        surface.resize(width, height, ratio)
        surface.clear()

        total, slices = compute_slices(items)
        result = ChartResult(total=total, total_text=format_currency(total, self.locale))
        if self.panel is not None:
            self.panel.set_total(result.total_text)

        if not items or total <= 0:
            result.notice = NO_DATA_MESSAGE if not items else ZERO_TOTAL_MESSAGE
            if self.panel is not None:
                self.panel.show_notice(result.notice)
                self.panel.set_legend([])
            return result

        if self.panel is not None:
            self.panel.hide_notice()

        cx, cy = width / 2, height / 2
        radius = outer_radius(width, height)
        for piece in slices:
            if piece.sweep > 0:
                surface.wedge(cx, cy, radius, piece.start, piece.end,
                              piece.color, STROKE_RGBA, STROKE_WIDTH)
            text_color = contrast_color(piece.color)
            name_at, percent_at = label_positions(cx, cy, radius, piece.mid)
            surface.text(name_at[0], name_at[1], piece.model, piece.mid,
                         text_color, NAME_FONT_SIZE, True)
            surface.text(percent_at[0], percent_at[1], format_percent(piece.fraction), piece.mid,
                         text_color, PERCENT_FONT_SIZE, False)

        result.slices = slices
        result.legend = [
            LegendRow(normalize_color(item.color), item.model, format_currency(item.price, self.locale))
            for item in items
        ]
        if self.panel is not None:
            self.panel.set_legend(result.legend)
        return result


# --------------------------------------------------------------------- #
#   Matplotlib surface and export
# --------------------------------------------------------------------- #
class MatplotlibSurface:
    """
    Surface backed by a matplotlib figure.

    The axes span the whole figure with one data unit per logical pixel and
    the y-axis inverted, so angles keep the clockwise screen convention.
    """

    def __init__(self, width: float = DEFAULT_CHART_SIZE, height: float = DEFAULT_CHART_SIZE,
                 ratio: float = 1.0):
        self._width = width
        self._height = height
        self._ratio = ratio
        self.figure = Figure()
        self.axes = None

    def size(self):
        return self._width, self._height

    def pixel_ratio(self) -> float:
        return self._ratio

    def resize(self, width, height, ratio) -> None:
        self._width, self._height, self._ratio = width, height, ratio
        self.figure.clear()
        self.figure.set_dpi(BASE_DPI * ratio)
        self.figure.set_size_inches(width / BASE_DPI, height / BASE_DPI)
        self.axes = self.figure.add_axes([0, 0, 1, 1])
        self.axes.set_xlim(0, width)
        self.axes.set_ylim(height, 0)
        self.axes.set_axis_off()

    def clear(self) -> None:
        for artist in list(self.axes.patches) + list(self.axes.texts):
            artist.remove()

    def wedge(self, cx, cy, radius, start, end, fill, stroke, stroke_width) -> None:
        patch = Wedge(
            (cx, cy), radius, math.degrees(start), math.degrees(end),
            facecolor=fill, edgecolor=stroke,
            linewidth=stroke_width * 72 / BASE_DPI,
        )
        self.axes.add_patch(patch)

    def text(self, x, y, text, rotation, color, size, bold) -> None:
        self.axes.text(
            x, y, text,
            rotation=-math.degrees(rotation), rotation_mode="anchor",
            ha="center", va="center", color=color,
            fontsize=size * 72 / BASE_DPI,
            fontweight="bold" if bold else "normal",
        )

    def save(self, path: str) -> None:
        self.figure.savefig(path, dpi=self.figure.dpi)


def export_chart(items, path: str, width: float = DEFAULT_CHART_SIZE,
                 height: float = DEFAULT_CHART_SIZE, ratio: float = 2.0) -> ChartResult:
    """Render ``items`` to an image file at ``path`` (format from the extension)."""
    surface = MatplotlibSurface(width, height, ratio)
    result = ChartRenderer(surface).render(items)
    if result.notice:
        surface.axes.text(width / 2, height / 2, result.notice,
                          ha="center", va="center", color="#666666",
                          fontsize=PERCENT_FONT_SIZE * 72 / BASE_DPI)
    surface.save(path)
    return result
