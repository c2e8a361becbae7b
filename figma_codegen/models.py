"""
資料模型 — Figma 節點樹、樣式紀錄、資產紀錄與產出物

DesignNode 由 figma_reader 建立後即不再變動；annotator 在其上疊加
分類、樣式與命名，產出 AnnotatedComponent 供三個 emitter 共用。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


VECTOR_TYPES = frozenset({"VECTOR", "BOOLEAN_OPERATION", "STAR", "ELLIPSE", "POLYGON", "LINE"})
COMPONENT_TYPES = frozenset({"COMPONENT", "COMPONENT_SET"})
CONTAINER_TYPES = frozenset({"DOCUMENT", "CANVAS", "FRAME", "GROUP", "INSTANCE", "SECTION"})


class NodeKind(str, Enum):
    CONTAINER = "CONTAINER"
    TEXT = "TEXT"
    SHAPE = "SHAPE"
    VECTOR = "VECTOR"
    COMPONENT = "COMPONENT"


class NodeRole(str, Enum):
    """Classifier 的輸出：決定 emitter 如何呈現一個節點."""
    CONTAINER = "container"
    TEXT = "text"
    SHAPE = "shape"
    VECTOR_ASSET = "vector"
    RASTER_ASSET = "raster"
    DECORATION = "decoration"

    @property
    def is_asset(self) -> bool:
        return self in (NodeRole.VECTOR_ASSET, NodeRole.RASTER_ASSET)


class ExportFormat(str, Enum):
    SVG = "svg"
    PNG = "png"


@dataclass(frozen=True)
class Paint:
    type: str
    color: Optional[dict] = None
    opacity: float = 1.0
    visible: bool = True


@dataclass(frozen=True)
class Padding:
    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0


@dataclass(frozen=True)
class LayoutInfo:
    """Auto Layout 參數（容器）與子節點自身的 sizing 設定."""
    mode: Optional[str] = None
    item_spacing: Optional[float] = None
    padding: Optional[Padding] = None
    primary_align: Optional[str] = None
    counter_align: Optional[str] = None
    sizing_horizontal: Optional[str] = None
    sizing_vertical: Optional[str] = None
    grow: Optional[float] = None

    @property
    def axis(self) -> Optional[str]:
        if self.mode in (None, "NONE"):
            return None
        return "row" if self.mode == "HORIZONTAL" else "column"


@dataclass(frozen=True)
class DesignNode:
    id: str
    name: str
    type: str
    width: Optional[float] = None
    height: Optional[float] = None
    fills: tuple = ()
    layout: Optional[LayoutInfo] = None
    export_settings: tuple = ()
    characters: str = ""
    style: dict = field(default_factory=dict)
    corner_radius: Optional[float] = None
    corner_radii: Optional[tuple] = None
    background_color: Optional[dict] = None
    children: tuple = ()

    @property
    def kind(self) -> NodeKind:
        if self.type in COMPONENT_TYPES:
            return NodeKind.COMPONENT
        if self.type == "TEXT":
            return NodeKind.TEXT
        if self.type in VECTOR_TYPES:
            return NodeKind.VECTOR
        if self.type in CONTAINER_TYPES:
            return NodeKind.CONTAINER
        return NodeKind.SHAPE

    @property
    def has_image_fill(self) -> bool:
        return any(paint.type == "IMAGE" for paint in self.fills)

    def walk(self):
        """Pre-order, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class FigmaDocument:
    name: str
    root: DesignNode
    styles: dict = field(default_factory=dict)


@dataclass(frozen=True)
class TextStyle:
    characters: str
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[float] = None
    line_height: Optional[float] = None
    letter_spacing: Optional[float] = None
    text_align: Optional[str] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class StyleRecord:
    display: Optional[str] = None
    direction: Optional[str] = None
    justify: Optional[str] = None
    align: Optional[str] = None
    gap: Optional[float] = None
    padding: Optional[Padding] = None
    width: Optional[str] = None
    height: Optional[str] = None
    flex_grow: bool = False
    background_color: Optional[str] = None
    border_radius: Optional[float] = None
    text: Optional[TextStyle] = None


@dataclass(frozen=True)
class AssetRecord:
    node_id: str
    name: str
    node_type: str
    has_image_fill: bool
    export_format: ExportFormat
    filename: Optional[str] = None


@dataclass(frozen=True)
class Identifier:
    component_name: str
    element_class: str = ""

    @property
    def component_class(self) -> str:
        return self.component_name.lower()

    @property
    def css_class(self) -> str:
        if not self.element_class:
            return self.component_class
        return f"{self.component_class}__{self.element_class}"


@dataclass(frozen=True)
class AnnotatedNode:
    node: DesignNode
    role: NodeRole
    identifier: Identifier
    style: StyleRecord
    text_prop: Optional[str] = None
    children: tuple = ()

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class AnnotatedComponent:
    """一個組件的完整註記樹；三個 emitter 只讀取它."""
    source: DesignNode
    identifier: Identifier
    root: AnnotatedNode
    text_props: tuple = ()
    asset_node_ids: tuple = ()
    # 組件根節點本身是資產時（例如 IMAGE fill 的 Avatar），以子元素形式輸出的圖片
    root_image: Optional[AnnotatedNode] = None

    @property
    def name(self) -> str:
        return self.identifier.component_name

    @property
    def component_class(self) -> str:
        return self.identifier.component_class

    @property
    def has_assets(self) -> bool:
        return bool(self.asset_node_ids)

    def elements(self):
        """Every annotated node below the root, pre-order."""
        if self.root_image is not None:
            yield self.root_image
        for child in self.root.children:
            yield from child.walk()


@dataclass(frozen=True)
class GeneratedArtifactSet:
    component_name: str
    template: str
    stylesheet: str
    catalog: str
    twig: Optional[str] = None
