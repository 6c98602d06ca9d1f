"""SVG pie charts for compliance distributions."""
from __future__ import annotations

import math
from typing import List, Sequence, Tuple

from .html_utils import Palette, escape_html

RADIUS = 50
CENTER = 60
SIZE = 120


def _point(angle: float) -> Tuple[float, float]:
    radians = math.radians(angle)
    return (
        round(CENTER + RADIUS * math.cos(radians), 2),
        round(CENTER + RADIUS * math.sin(radians), 2),
    )


def _slice_path(start: float, sweep: float, color: str) -> str:
    start_x, start_y = _point(start)
    end_x, end_y = _point(start + sweep)
    large_arc = 1 if sweep > 180 else 0
    return (
        f'<path d="M {CENTER} {CENTER} L {start_x} {start_y} '
        f'A {RADIUS} {RADIUS} 0 {large_arc} 1 {end_x} {end_y} Z" fill="{color}"/>'
    )


def pie_chart(segments: Sequence[Tuple[int, str]], palette: Palette, label: str) -> str:
    """Return an SVG pie chart of ``(value, colour)`` segments.

    Returns an empty string when every segment is zero. A segment covering
    the whole pie is drawn as a filled circle since an SVG arc cannot start
    and end on the same point.
    """

    total = sum(value for value, _ in segments if value > 0)
    if total == 0:
        return ""

    shapes: List[str] = []
    angle = 0.0
    for value, color in segments:
        if value <= 0:
            continue
        if value == total:
            shapes.append(f'<circle cx="{CENTER}" cy="{CENTER}" r="{RADIUS}" fill="{color}"/>')
            break
        sweep = value / total * 360
        shapes.append(_slice_path(angle, sweep, color))
        angle += sweep

    return (
        f'<svg width="{SIZE}" height="{SIZE}" viewBox="0 0 {SIZE} {SIZE}">'
        f'<circle cx="{CENTER}" cy="{CENTER}" r="{RADIUS}" fill="none" stroke="{palette.border}" stroke-width="2"/>'
        + "".join(shapes)
        + f'<text x="{CENTER}" y="{CENTER + 5}" text-anchor="middle" font-size="12" font-weight="600" '
        f'fill="{palette.text}">{escape_html(label)}</text>'
        "</svg>"
    )


def compliance_pie(compliant: int, non_compliant: int, insufficient: int, palette: Palette) -> str:
    """Return a pie chart of compliant / non-compliant / insufficient counts."""

    total = compliant + non_compliant + insufficient
    return pie_chart(
        [
            (compliant, palette.compliant_fg),
            (non_compliant, palette.noncompliant_fg),
            (insufficient, palette.insufficient_fg),
        ],
        palette,
        str(total),
    )


__all__ = ["compliance_pie", "pie_chart"]
