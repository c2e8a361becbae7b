"""
Style Extractor — Figma geometry / paint / typography → StyleRecord.

Only the first visible SOLID fill is used for color; gradients, images and
secondary fills are ignored on purpose.
"""

from __future__ import annotations

from typing import Optional

from .models import DesignNode, StyleRecord, TextStyle


PRIMARY_ALIGN = {
    "MIN": "start",
    "CENTER": "center",
    "MAX": "end",
    "SPACE_BETWEEN": "space-between",
}

COUNTER_ALIGN = {
    "MIN": "start",
    "CENTER": "center",
    "MAX": "end",
}

TEXT_ALIGN = {
    "LEFT": "left",
    "CENTER": "center",
    "RIGHT": "right",
    "JUSTIFIED": "justify",
}


def figma_color_to_css(color: Optional[dict], opacity: float = 1.0) -> Optional[str]:
    if not color:
        return None
    r = round(color.get("r", 0) * 255)
    g = round(color.get("g", 0) * 255)
    b = round(color.get("b", 0) * 255)
    a = color.get("a", 1) * opacity
    if a < 1:
        return f"rgba({r}, {g}, {b}, {format_number(a)})"
    return f"rgb({r}, {g}, {b})"


def format_number(value: float) -> str:
    """12.0 → '12'，12.345 → '12.35'."""
    rounded = round(float(value), 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:g}"


def solid_fill_color(node: DesignNode) -> Optional[str]:
    for paint in node.fills:
        if paint.visible and paint.type == "SOLID":
            return figma_color_to_css(paint.color, paint.opacity)
    return None


def corner_radius(node: DesignNode) -> Optional[float]:
    if node.corner_radius is not None:
        return node.corner_radius
    if node.corner_radii:
        return node.corner_radii[0]
    return None


def extract_text_style(node: DesignNode) -> Optional[TextStyle]:
    """Absent typography fields stay None; the emitter skips them."""
    if node.type != "TEXT" or not node.characters:
        return None
    style = node.style or {}
    align = style.get("textAlignHorizontal")
    return TextStyle(
        characters=node.characters,
        font_family=style.get("fontFamily"),
        font_size=style.get("fontSize"),
        font_weight=style.get("fontWeight"),
        line_height=style.get("lineHeightPx", style.get("lineHeight")),
        letter_spacing=style.get("letterSpacing"),
        text_align=TEXT_ALIGN.get(align),
        color=solid_fill_color(node),
    )


def _dimension(
    size: Optional[float],
    sizing: Optional[str],
    grow: Optional[float],
    on_primary_axis: bool,
) -> tuple[Optional[str], bool]:
    """回傳 (CSS 尺寸, 是否 flex-grow)。HUG 與無尺寸時回傳 None。"""
    if sizing == "FILL":
        if on_primary_axis and (grow or 0) >= 1:
            return None, True
        return "100%", False
    if sizing == "HUG":
        return None, False
    if size is None:
        return None, False
    return f"{round(size)}px", False


def extract_style(
    node: DesignNode,
    parent_axis: Optional[str] = None,
    is_asset: bool = False,
    is_root: bool = False,
    root_text: Optional[TextStyle] = None,
) -> StyleRecord:
    layout = node.layout
    axis = layout.axis if layout else None

    display = direction = justify = align = None
    gap = None
    padding = None
    if axis:
        display = "flex"
        direction = axis
        justify = PRIMARY_ALIGN.get(layout.primary_align, "start")
        align = COUNTER_ALIGN.get(layout.counter_align, "start")
    elif is_root:
        direction = "column"
        justify = align = "start"
    if is_root:
        display = "inline-flex" if direction == "row" else "flex"
    if layout:
        gap = layout.item_spacing
        padding = layout.padding

    sizing_h = layout.sizing_horizontal if layout else None
    sizing_v = layout.sizing_vertical if layout else None
    grow = layout.grow if layout else None
    width, grow_h = _dimension(node.width, sizing_h, grow, parent_axis == "row")
    height, grow_v = _dimension(node.height, sizing_v, grow, parent_axis == "column")

    background = None
    radius = None
    if not is_asset and node.type != "TEXT":
        background = solid_fill_color(node) or figma_color_to_css(node.background_color)
        radius = corner_radius(node)

    text = extract_text_style(node)
    if is_root and text is None:
        text = root_text

    return StyleRecord(
        display=display,
        direction=direction,
        justify=justify,
        align=align,
        gap=gap,
        padding=padding,
        width=width,
        height=height,
        flex_grow=grow_h or grow_v,
        background_color=background,
        border_radius=radius,
        text=text,
    )

