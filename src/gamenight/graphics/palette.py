"""
Tabletop palette: warm wood, leather and brass.
"""

from dataclasses import dataclass

from gamenight.graphics.primitives import Color


def hex_to_rgb(hex_color: str) -> Color:
    """Convert '#RRGGBB' to an RGB tuple."""
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        raise ValueError(f"Expected #RRGGBB, got {hex_color!r}")
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


@dataclass(frozen=True)
class WheelPalette:
    """Wheel color palette."""
    wood_brown: str = "#4A3429"     # Odd segments, empty wheel
    saddle_brown: str = "#6B4A2B"   # Last segment of an odd wheel
    leather_dark: str = "#2C1810"   # Background, segment borders
    leather_light: str = "#5C4033"  # Even segments
    brass_gold: str = "#B8860B"     # Rim, pointer body
    brass_light: str = "#DAA520"    # Highlights
    brass_dark: str = "#996F00"     # Rim edge, pointer outline
    parchment: str = "#F5F5DC"      # Labels
    ink_dark: str = "#2F1B14"       # Label shadow

    def rgb(self, color_name: str) -> Color:
        """Look up a palette entry as RGB."""
        return hex_to_rgb(getattr(self, color_name))

    def segment_colors(self) -> tuple[Color, Color, Color]:
        """Segment fills: even, odd, and the closing segment of an odd wheel."""
        return self.rgb("leather_light"), self.rgb("wood_brown"), self.rgb("saddle_brown")


DEFAULT_PALETTE = WheelPalette()
