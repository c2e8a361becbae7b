"""
Design tokens — Figma local variables → _tokens.scss

Variables 取不到（權限不足、方案不支援）時不中斷流程，
改由文件樹擷取簡易 token 索引（顏色、字級、字型）。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

from .models import DesignNode
from .naming_engine import to_identifier
from .style_extractor import figma_color_to_css, format_number, solid_fill_color


logger = logging.getLogger(__name__)

EMPTY_VARIABLES = {"meta": {"variables": {}, "variableCollections": {}}}

_SPACING_HINTS = ("spacing", "space", "gap", "padding", "margin")
_TYPE_SIZE_HINTS = ("font-size", "line-height")

CATEGORY_LABELS = (
    ("colors", "Colors"),
    ("typography", "Typography"),
    ("spacing", "Spacing"),
    ("other", "Other"),
)


@dataclass
class DesignTokens:
    colors: dict = field(default_factory=dict)
    typography: dict = field(default_factory=dict)
    spacing: dict = field(default_factory=dict)
    other: dict = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (self.colors or self.typography or self.spacing or self.other)

    def count(self) -> int:
        return len(self.colors) + len(self.typography) + len(self.spacing) + len(self.other)


def token_name(name: str) -> str:
    """'Color/Primary 500' → 'color-primary-500'."""
    return to_identifier(name.replace("/", "-"))


def fetch_variables(client, file_key: str) -> dict:
    logger.info("ℹ Fetching design variables...")
    try:
        payload = client.get_local_variables(file_key)
    except (requests.RequestException, ValueError) as e:
        logger.warning("⚠ Could not fetch variables: %s", e)
        return EMPTY_VARIABLES
    variables = (payload.get("meta") or {}).get("variables") or {}
    logger.info("✓ Fetched %d variables", len(variables))
    return payload


def _first_mode_value(variable: dict):
    values = variable.get("valuesByMode") or {}
    if not values:
        return None
    return next(iter(values.values()))


def _resolve_alias(value, variables: dict, seen=None):
    """VARIABLE_ALIAS 沿著變數表解析到實際值；循環或斷鏈回傳 None."""
    seen = seen or set()
    while isinstance(value, dict) and value.get("type") == "VARIABLE_ALIAS":
        target_id = value.get("id")
        if target_id in seen or target_id not in variables:
            return None
        seen.add(target_id)
        value = _first_mode_value(variables[target_id])
    return value


def extract_tokens(variables_payload: dict) -> DesignTokens:
    tokens = DesignTokens()
    variables = (variables_payload.get("meta") or {}).get("variables") or {}

    for variable_id, variable in variables.items():
        raw_name = variable.get("name", "")
        name = token_name(raw_name)
        if not name:
            continue
        lowered = raw_name.lower()
        value = _resolve_alias(_first_mode_value(variable), variables, {variable_id})
        if value is None:
            logger.debug("Unresolved variable: %s", raw_name)
            continue

        resolved_type = variable.get("resolvedType")
        if resolved_type == "COLOR":
            css = figma_color_to_css(value) if isinstance(value, dict) else None
            if css:
                tokens.colors[name] = css
        elif resolved_type == "FLOAT":
            if any(hint in lowered for hint in _SPACING_HINTS):
                tokens.spacing[name] = f"{format_number(value)}px"
            elif any(hint in lowered for hint in _TYPE_SIZE_HINTS):
                tokens.typography[name] = f"{format_number(value)}px"
            else:
                tokens.other[name] = format_number(value)
        elif resolved_type == "STRING":
            target = tokens.typography if "font" in lowered else tokens.other
            target[name] = f'"{value}"'
        else:
            tokens.other[name] = str(value).lower() if isinstance(value, bool) else str(value)

    logger.info("✓ Extracted %d color tokens", len(tokens.colors))
    logger.info("✓ Extracted %d typography tokens", len(tokens.typography))
    logger.info("✓ Extracted %d spacing tokens", len(tokens.spacing))
    return tokens


def collect_tree_tokens(root: DesignNode) -> DesignTokens:
    """從文件樹擷取顏色、字級、字型（去重，依出現順序編號）."""
    colors: list[str] = []
    sizes: list[str] = []
    families: list[str] = []
    for node in root.walk():
        color = solid_fill_color(node)
        if color:
            colors.append(color)
        font_size = node.style.get("fontSize")
        if font_size:
            sizes.append(format_number(font_size))
        font_family = node.style.get("fontFamily")
        if font_family:
            families.append(font_family)

    tokens = DesignTokens()
    for index, color in enumerate(dict.fromkeys(colors), start=1):
        tokens.colors[f"color-{index}"] = color
    for size in dict.fromkeys(sizes):
        tokens.typography[f"font-size-{size}"] = f"{size}px"
    for index, family in enumerate(dict.fromkeys(families), start=1):
        tokens.typography[f"font-family-{index}"] = f'"{family}"'
    return tokens


def render_tokens_scss(tokens: DesignTokens) -> str:
    lines = [
        "/**",
        " * Design Tokens",
        " * Auto-generated from Figma",
        " * Do not edit manually",
        " */",
        "",
        "// Export tokens as CSS custom properties",
        ":root {",
    ]
    for attr, label in CATEGORY_LABELS:
        group = getattr(tokens, attr)
        if not group:
            continue
        lines.append(f"  // {label}")
        lines.extend(f"  --{name}: {value};" for name, value in group.items())
        lines.append("")
    lines.extend(["}", "", "// SCSS Variables", ""])

    for attr, label in CATEGORY_LABELS:
        group = getattr(tokens, attr)
        if not group:
            continue
        lines.append(f"// {label}")
        lines.extend(f"${name}: {value};" for name, value in group.items())
        lines.append("")
    return "\n".join(lines)


def render_variables_scss(tokens_import: str = "../styles/tokens") -> str:
    return f"""// Design System Variables
// Auto-generated from Figma

// Import main tokens
@use '{tokens_import}';

// CSS Variables
:root {{
  --spacing-xs: 0.25rem;
  --spacing-sm: 0.5rem;
  --spacing-md: 1rem;
  --spacing-lg: 1.5rem;
  --spacing-xl: 2rem;

  --font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Roboto', sans-serif;
  --font-size-sm: 0.875rem;
  --font-size-md: 1rem;
  --font-size-lg: 1.25rem;
  --font-size-xl: 1.5rem;

  --color-primary: #007bff;
  --color-secondary: #6c757d;
  --color-success: #28a745;
  --color-danger: #dc3545;
  --color-warning: #ffc107;
  --color-info: #17a2b8;
}}
"""
