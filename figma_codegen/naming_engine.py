"""
命名引擎 — Figma 圖層名稱 → 組件名稱 / BEM class

組件名稱：PascalCase，整份文件唯一（Header、Header2…）。
元素 class：slug，同一組件內唯一，前序走訪先到先得（icon、icon-1…）。
"""

import re
from dataclasses import dataclass
from typing import Optional


_WHITESPACE_RE = re.compile(r"\s+")
_IDENTIFIER_STRIP_RE = re.compile(r"[^a-z0-9\-_]")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]+")


@dataclass
class NamingConfig:
    """命名引擎設定."""
    fallback_component: str = "Unnamed"
    digit_prefix: str = "Component"
    fallback_element: str = "el"
    first_component_suffix: int = 2
    # stories 檔裡已使用的識別字，組件不能同名
    reserved_components: tuple = ("React", "Template", "Default", "WithImage", "WithCustomClass")


def to_identifier(label: str) -> str:
    """小寫、空白轉 '-'、移除 [a-z0-9-_] 以外字元。對自身輸出是冪等的。"""
    slug = _WHITESPACE_RE.sub("-", (label or "").lower())
    return _IDENTIFIER_STRIP_RE.sub("", slug)


def to_component_name(label: str) -> str:
    """依非英數字元切段，每段首字大寫、其餘小寫後串接。"""
    parts = [p for p in _NON_ALNUM_RE.split(label or "") if p]
    return "".join(p[:1].upper() + p[1:].lower() for p in parts)


class ElementNamer:
    """單一組件範圍內的元素 class 分配器（used-name set 每個組件重新建立）."""

    def __init__(self, config: Optional[NamingConfig] = None):
        self.config = config or NamingConfig()
        self._used: set[str] = set()
        self._position = 0

    def resolve(self, label: str) -> str:
        self._position += 1
        base = to_identifier(label) or f"{self.config.fallback_element}-{self._position}"
        name = base
        suffix = 1
        while name in self._used:
            name = f"{base}-{suffix}"
            suffix += 1
        self._used.add(name)
        return name

    @property
    def used(self) -> frozenset:
        return frozenset(self._used)


class ComponentNamer:
    """整份文件範圍內的組件名稱分配器."""

    def __init__(self, config: Optional[NamingConfig] = None):
        self.config = config or NamingConfig()
        self._used: set[str] = {name.lower() for name in self.config.reserved_components}

    def resolve(self, label: str) -> str:
        base = to_component_name(label) or self.config.fallback_component
        if base[0].isdigit():
            base = f"{self.config.digit_prefix}{base}"
        name = base
        counter = self.config.first_component_suffix
        while name.lower() in self._used:
            name = f"{base}{counter}"
            counter += 1
        # component class 是小寫名稱，所以以小寫判斷碰撞
        self._used.add(name.lower())
        return name


def preview_naming_tree(component, indent: int = 0) -> str:
    """除錯用：印出組件的 class / prop 命名樹."""
    lines = [f"{component.name}  .{component.component_class}"]
    nodes = component.root.children
    if component.root_image is not None:
        nodes = (component.root_image,) + nodes
    for node in nodes:
        lines.extend(_preview_lines(node, indent + 1))
    return "\n".join(lines)


def _preview_lines(node, indent: int) -> list:
    prefix = "  " * indent
    label = f"{prefix}├─ {node.identifier.css_class}  [{node.role.value}]"
    if node.text_prop:
        label += f"  {{{node.text_prop}}}"
    lines = [label]
    for child in node.children:
        lines.extend(_preview_lines(child, indent + 1))
    return lines
