"""Nearest-neighbour scaling of fonts, for larger text without larger data."""

from __future__ import annotations

from dataclasses import dataclass, fields

from .font import Font, PixelCallback

__all__ = ["ScaledFont", "scale_font"]


@dataclass(kw_only=True)
class ScaledFont(Font):
    """A font that renders another font enlarged by integer factors."""

    basefont: Font
    x_scale: int = 1
    y_scale: int = 1

    def glyph_width(self, character: int) -> int:
        return self.x_scale * self.basefont.glyph_width(character)

    def render_glyph(self, x0: int, y0: int, character: int, callback: PixelCallback) -> int:
        x_scale, y_scale = self.x_scale, self.y_scale

        def scaled(x: int, y: int, count: int, alpha: int) -> None:
            count *= x_scale
            x = x0 + x * x_scale
            y = y0 + y * y_scale
            for dy in range(y_scale):
                callback(x, y + dy, count, alpha)

        return x_scale * self.basefont.render_glyph(0, 0, character, scaled)


def scale_font(basefont: Font, x_scale: int, y_scale: int) -> ScaledFont:
    """Create a font that renders ``basefont`` scaled by the given factors."""
    attrs = {f.name: getattr(basefont, f.name) for f in fields(Font)}
    attrs["width"] *= x_scale
    attrs["height"] *= y_scale
    attrs["baseline_x"] *= x_scale
    attrs["baseline_y"] *= y_scale
    attrs["min_x_advance"] *= x_scale
    attrs["max_x_advance"] *= x_scale
    attrs["line_height"] *= y_scale
    return ScaledFont(basefont=basefont, x_scale=x_scale, y_scale=y_scale, **attrs)