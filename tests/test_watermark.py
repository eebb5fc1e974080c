"""Tests for the identity watermark."""

from reportvault.viewer.watermark import (
    COLOR,
    OPACITY,
    REPEAT,
    stamp_page,
    watermark_text,
    watermark_tiles,
)


class TestWatermarkText:
    def test_format(self):
        assert watermark_text("ana@fortiv.example") == (
            "ana@fortiv.example  ·  CONFIDENTIAL  ·  FORTIV SOLUTIONS"
        )

    def test_organization_upper_cased(self):
        assert watermark_text("ana", "acme ltd").endswith("ACME LTD")


class TestWatermarkTiles:
    def test_layout(self):
        tiles = watermark_tiles("ana@fortiv.example")
        assert len(tiles) == 12
        assert [t.top_pct for t in tiles[:3]] == [-5, 4, 13]
        assert tiles[-1].top_pct == 94
        tile = tiles[0]
        assert (tile.left_pct, tile.width_pct, tile.angle_deg) == (-20, 150, -30)
        assert tile.opacity == OPACITY == 0.08
        assert tile.color == COLOR == "#1783DF"
        assert tile.text == watermark_text("ana@fortiv.example") * REPEAT


class TestStampPage:
    def test_page_text_wins(self):
        lines = ["Revenue 42", "", "", "Total"]
        stamped = stamp_page(lines, 20, "WATERMARK", row_gap=3)
        first = "".join(seg for seg, _ in stamped[0])
        assert len(first) == 20
        for index, char in enumerate("Revenue 42"):
            if char != " ":
                assert first[index] == char
        assert any(is_mark for _, is_mark in stamped[0])

    def test_only_every_gap_row_marked(self):
        stamped = stamp_page([""] * 6, 30, "MARK", row_gap=3)
        marked_rows = [i for i, runs in enumerate(stamped) if any(m for _, m in runs)]
        assert marked_rows == [0, 3]
        assert stamped[1] == [(" " * 30, False)]

    def test_lines_clipped_to_width(self):
        stamped = stamp_page(["x" * 50], 10, "MARK")
        assert stamped == [[("x" * 10, False)]]

    def test_bands_shift(self):
        stamped = stamp_page([""] * 4, 40, "ABCDEFGHIJ", row_gap=3)
        row0 = "".join(seg for seg, _ in stamped[0])
        row3 = "".join(seg for seg, _ in stamped[3])
        assert row0 != row3

    def test_empty_text_passthrough(self):
        assert stamp_page(["a"], 5, "") == [[("a", False)]]
