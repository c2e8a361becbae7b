"""
Classifier — decide a node's role from its own fields only.

No parent context is needed, so results are order-independent and can be
memoized per node id.
"""

from typing import Optional

from .models import DesignNode, ExportFormat, NodeRole, VECTOR_TYPES


# Figma 類型中沒有視覺輸出的節點
NON_VISUAL_TYPES = frozenset({"SLICE", "STICKY", "CONNECTOR", "WIDGET", "EMBED", "LINK_UNFURL", "SHAPE_WITH_TEXT"})


def is_asset_candidate(node: DesignNode) -> bool:
    if node.export_settings:
        return True
    if node.has_image_fill:
        return True
    return node.type in VECTOR_TYPES


def export_format(node: DesignNode) -> Optional[ExportFormat]:
    """Raster for image fills (even on vector shapes), SVG for vector types."""
    if node.has_image_fill:
        return ExportFormat.PNG
    if node.type in VECTOR_TYPES:
        return ExportFormat.SVG
    if node.export_settings:
        fmt = (node.export_settings[0].get("format") or "").upper()
        return ExportFormat.SVG if fmt == "SVG" else ExportFormat.PNG
    return None


def is_text_node(node: DesignNode) -> bool:
    return node.type == "TEXT" and bool(node.characters)


def classify(node: DesignNode) -> NodeRole:
    fmt = export_format(node)
    if fmt is ExportFormat.PNG:
        return NodeRole.RASTER_ASSET
    if fmt is ExportFormat.SVG:
        return NodeRole.VECTOR_ASSET
    if node.type == "TEXT":
        return NodeRole.TEXT if is_text_node(node) else NodeRole.DECORATION
    if node.type in NON_VISUAL_TYPES:
        return NodeRole.DECORATION
    if node.children:
        return NodeRole.CONTAINER
    return NodeRole.SHAPE


class Classifier:
    """classify() with a per-node-id cache."""

    def __init__(self):
        self._cache: dict[str, NodeRole] = {}

    def __call__(self, node: DesignNode) -> NodeRole:
        role = self._cache.get(node.id)
        if role is None:
            role = classify(node)
            self._cache[node.id] = role
        return role

    def __len__(self) -> int:
        return len(self._cache)
