"""
Figma REST API 讀取與節點樹正規化

FigmaAPIClient：唯讀 API 封裝（文件、變數、圖片匯出 URL、下載）。
read_document：把 /files 回應轉成不可變的 DesignNode 樹，不做任何產生邏輯。
"""

from typing import Optional

import requests

from .models import DesignNode, FigmaDocument, LayoutInfo, Padding, Paint


DEFAULT_TIMEOUT = 30.0


class FigmaAPIClient:
    """Figma REST API 唯讀封裝."""

    BASE_URL = "https://api.figma.com/v1"

    def __init__(self, token: str, timeout: float = DEFAULT_TIMEOUT):
        self.token = token
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "X-Figma-Token": token,
            "Content-Type": "application/json",
        })

    def get_file(self, file_key: str) -> dict:
        url = f"{self.BASE_URL}/files/{file_key}"
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def get_local_variables(self, file_key: str) -> dict:
        url = f"{self.BASE_URL}/files/{file_key}/variables/local"
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def get_image_urls(
        self,
        file_key: str,
        node_ids: list,
        format: str = "png",
        scale: Optional[float] = None,
    ) -> dict:
        """回傳 { node_id: url | None }；API 回報 err 時拋出 ValueError。"""
        url = f"{self.BASE_URL}/images/{file_key}"
        params = {"ids": ",".join(node_ids), "format": format}
        if format == "svg":
            params["svg_include_id"] = "true"
        elif scale is not None:
            params["scale"] = scale
        resp = self.session.get(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        data = resp.json()
        if data.get("err"):
            raise ValueError(f"Figma image export error: {data['err']}")
        return data.get("images") or {}

    def download(self, url: str) -> bytes:
        # 匯出 URL 是預先簽章的 S3 連結，不帶 Figma token
        resp = requests.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.content


# ════════════════════════════════════════════════════════════
# Normalization
# ════════════════════════════════════════════════════════════

_LAYOUT_KEYS = (
    "layoutMode", "itemSpacing", "primaryAxisAlignItems", "counterAxisAlignItems",
    "layoutSizingHorizontal", "layoutSizingVertical", "layoutGrow",
    "paddingTop", "paddingRight", "paddingBottom", "paddingLeft",
)


def read_document(file_data: dict) -> FigmaDocument:
    """GET /files 的回應 → FigmaDocument."""
    document = file_data.get("document")
    if not isinstance(document, dict):
        raise ValueError("Figma file response has no 'document' node.")
    return FigmaDocument(
        name=file_data.get("name", ""),
        root=read_node(document),
        styles=file_data.get("styles") or {},
    )


def read_node(raw: dict) -> DesignNode:
    bbox = raw.get("absoluteBoundingBox") or {}
    radii = raw.get("rectangleCornerRadii")
    children = tuple(
        read_node(child)
        for child in raw.get("children", []) or []
        if child.get("visible", True)
    )
    return DesignNode(
        id=raw.get("id", ""),
        name=raw.get("name", ""),
        type=raw.get("type", "FRAME"),
        width=bbox.get("width"),
        height=bbox.get("height"),
        fills=_read_paints(raw.get("fills")),
        layout=read_layout(raw),
        export_settings=tuple(raw.get("exportSettings") or ()),
        characters=raw.get("characters") or "",
        style=dict(raw.get("style") or {}),
        corner_radius=raw.get("cornerRadius"),
        corner_radii=tuple(radii) if radii else None,
        background_color=raw.get("backgroundColor"),
        children=children,
    )


def read_layout(raw: dict) -> Optional[LayoutInfo]:
    if not any(key in raw for key in _LAYOUT_KEYS):
        return None
    return LayoutInfo(
        mode=raw.get("layoutMode"),
        item_spacing=raw.get("itemSpacing"),
        padding=read_padding(raw),
        primary_align=raw.get("primaryAxisAlignItems"),
        counter_align=raw.get("counterAxisAlignItems"),
        sizing_horizontal=raw.get("layoutSizingHorizontal"),
        sizing_vertical=raw.get("layoutSizingVertical"),
        grow=raw.get("layoutGrow"),
    )


def read_padding(raw: dict) -> Optional[Padding]:
    """四邊各自預設 0；完全沒有 padding 欄位時回傳 None。"""
    keys = ("paddingTop", "paddingRight", "paddingBottom", "paddingLeft")
    if not any(raw.get(k) is not None for k in keys):
        return None
    return Padding(
        top=raw.get("paddingTop") or 0,
        right=raw.get("paddingRight") or 0,
        bottom=raw.get("paddingBottom") or 0,
        left=raw.get("paddingLeft") or 0,
    )


def _read_paints(fills) -> tuple:
    if not isinstance(fills, list):
        return ()
    return tuple(
        Paint(
            type=fill.get("type", ""),
            color=fill.get("color"),
            opacity=fill.get("opacity", 1.0),
            visible=fill.get("visible", True),
        )
        for fill in fills
        if isinstance(fill, dict)
    )
