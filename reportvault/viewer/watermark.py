"""
Identity watermark for the secure viewer.

Two renditions of the same tiled, rotated, faint stamp:

  - ``watermark_tiles()`` — layout for graphical hosts: 12 diagonal bands
    of the text repeated 4 times, rotated -30°, at 8% opacity.
  - ``stamp_page()`` — character-grid rendition for terminal hosts: every
    ``row_gap``-th row carries the text in the blank cells, shifted per
    band so the stamp runs diagonally across the page.

The bands are dense enough that any cropped screenshot of a page still
contains at least one legible copy of the viewer's identity.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_ORGANIZATION = "FORTIV SOLUTIONS"
CONFIDENTIAL = "CONFIDENTIAL"
SEPARATOR = "  ·  "

WATERMARK_ROWS = 12
ROW_SPACING_PCT = 9
ROW_OFFSET_PCT = -5
LEFT_PCT = -20
WIDTH_PCT = 150
ANGLE_DEG = -30
OPACITY = 0.08
COLOR = "#1783DF"
REPEAT = 4

ROW_GAP = 3
BAND_SHIFT = 7  # columns each successive band moves right
_SPACER = "   "


@dataclass(frozen=True)
class WatermarkTile:
    top_pct: int
    left_pct: int
    width_pct: int
    angle_deg: int
    opacity: float
    color: str
    text: str


def watermark_text(identity: str, organization: str = DEFAULT_ORGANIZATION) -> str:
    return SEPARATOR.join((identity, CONFIDENTIAL, organization.upper()))


def watermark_tiles(identity: str, organization: str = DEFAULT_ORGANIZATION,
                    rows: int = WATERMARK_ROWS) -> list[WatermarkTile]:
    text = watermark_text(identity, organization) * REPEAT
    return [
        WatermarkTile(
            top_pct=i * ROW_SPACING_PCT + ROW_OFFSET_PCT,
            left_pct=LEFT_PCT,
            width_pct=WIDTH_PCT,
            angle_deg=ANGLE_DEG,
            opacity=OPACITY,
            color=COLOR,
            text=text,
        )
        for i in range(rows)
    ]


def _mark_row(text: str, width: int, band: int) -> str:
    unit = text + _SPACER
    shift = (band * BAND_SHIFT) % len(unit)
    repeated = unit * (width // len(unit) + 2)
    return repeated[shift:shift + width]


def stamp_page(lines: list[str], width: int, text: str,
               row_gap: int = ROW_GAP) -> list[list[tuple[str, bool]]]:
    """
    Overlay *text* onto a page of *lines* clipped/padded to *width*.

    Returns one list of ``(segment, is_mark)`` runs per line. Page
    characters always take precedence over the watermark.
    """
    if width <= 0 or not text:
        return [[(line, False)] for line in lines]

    stamped: list[list[tuple[str, bool]]] = []
    for row, line in enumerate(lines):
        cells = line[:width].ljust(width)
        if row % row_gap:
            stamped.append([(cells, False)])
            continue

        mark = _mark_row(text, width, row // row_gap)
        runs: list[tuple[str, bool]] = []
        for page_char, mark_char in zip(cells, mark):
            is_mark = page_char == " " and mark_char != " "
            char = mark_char if is_mark else page_char
            if runs and runs[-1][1] == is_mark:
                runs[-1] = (runs[-1][0] + char, is_mark)
            else:
                runs.append((char, is_mark))
        stamped.append(runs)
    return stamped
