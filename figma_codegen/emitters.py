"""
Emitters — annotated component → React template / SCSS / Storybook stories / Twig.

All renderers take the same (AnnotatedComponent, asset_map) pair and never
re-derive names: class names come from ``node.identifier.css_class`` and text
props from ``node.text_prop``, so the outputs always line up.
"""

from __future__ import annotations

import html
import json
from typing import Dict, List, Optional

from .assets import asset_handle
from .models import AnnotatedComponent, AnnotatedNode, AssetRecord, NodeRole, StyleRecord
from .style_extractor import format_number


DEFAULT_ASSETS_IMPORT = "../../assets/figma"
PLACEHOLDER_IMAGE = "https://via.placeholder.com/150"

CSS_ALIGN = {
    "start": "flex-start",
    "center": "center",
    "end": "flex-end",
    "space-between": "space-between",
}


def js_string(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )
    return f"'{escaped}'"


def _attr(value: str) -> str:
    return html.escape(value, quote=True)


def _px(value) -> str:
    return f"{format_number(value)}px"


def _filename(node: AnnotatedNode, asset_map: Dict[str, AssetRecord]) -> Optional[str]:
    record = asset_map.get(node.node.id)
    return record.filename if record else None


def _alt_text(node: AnnotatedNode) -> str:
    if node.node.name:
        return node.node.name
    return "icon" if node.role is NodeRole.VECTOR_ASSET else "asset"


def primary_asset_id(component: AnnotatedComponent) -> Optional[str]:
    """第一個（前序）資產元素綁定 imageSrc / imageAlt props."""
    return component.asset_node_ids[0] if component.asset_node_ids else None


def display_text(component: AnnotatedComponent) -> str:
    """只取 text props，資產子樹裡的文字不會進入描述."""
    joined = " ".join(value for _, value in component.text_props).strip()
    return joined or component.name


def top_level_nodes(component: AnnotatedComponent) -> tuple:
    """根 div 內直接輸出的節點；根節點本身的圖片排在最前面."""
    if component.root_image is not None:
        return (component.root_image,) + component.root.children
    return component.root.children


# ════════════════════════════════════════════════════════════
# Template (React)
# ════════════════════════════════════════════════════════════

def _render_jsx(
    node: AnnotatedNode,
    asset_map: Dict[str, AssetRecord],
    primary_id: Optional[str],
    indent: int,
) -> List[str]:
    pad = "  " * indent
    class_name = node.identifier.css_class

    if node.role.is_asset:
        filename = _filename(node, asset_map)
        alt = _alt_text(node)
        if node.node.id == primary_id:
            if filename:
                return [
                    f"{pad}<img src={{imageSrc || {asset_handle(filename)}}} "
                    f"alt={{imageAlt || {js_string(alt)}}} className=\"{class_name}\" />"
                ]
            return [
                f"{pad}{{imageSrc ? (",
                f"{pad}  <img src={{imageSrc}} alt={{imageAlt || {js_string(alt)}}} className=\"{class_name}\" />",
                f"{pad}) : (",
                f"{pad}  <div className=\"{class_name}\"></div>",
                f"{pad})}}",
            ]
        if filename:
            return [f"{pad}<img src={{{asset_handle(filename)}}} alt=\"{_attr(alt)}\" className=\"{class_name}\" />"]
        return [f"{pad}<div className=\"{class_name}\"></div>"]

    if node.role is NodeRole.TEXT:
        return [f"{pad}<span className=\"{class_name}\">{{{node.text_prop}}}</span>"]

    if node.role is NodeRole.CONTAINER and node.children:
        lines = [f"{pad}<div className=\"{class_name}\">"]
        for child in node.children:
            lines.extend(_render_jsx(child, asset_map, primary_id, indent + 1))
        lines.append(f"{pad}</div>")
        return lines

    return [f"{pad}<div className=\"{class_name}\"></div>"]


def template_imports(component: AnnotatedComponent, asset_map: Dict[str, AssetRecord]) -> List[str]:
    filenames = []
    for node in component.elements():
        if node.role.is_asset:
            filename = _filename(node, asset_map)
            if filename and filename not in filenames:
                filenames.append(filename)
    return filenames


def render_template(
    component: AnnotatedComponent,
    asset_map: Dict[str, AssetRecord],
    assets_import: str = DEFAULT_ASSETS_IMPORT,
) -> str:
    name = component.name
    component_class = component.component_class
    primary_id = primary_asset_id(component)

    lines = [
        "import React from 'react';",
        f"import './{name}.scss';",
    ]
    for filename in template_imports(component, asset_map):
        lines.append(f"import {asset_handle(filename)} from '{assets_import}/{filename}';")

    element_count = sum(1 for _ in component.elements())
    lines.extend([
        "",
        "/**",
        f" * {name} Component",
        " * Auto-generated from Figma",
        " *",
        f" * Contains {len(component.text_props)} text element(s)",
        f" * {element_count} child element(s)",
        f" * {len(component.asset_node_ids)} asset(s)",
        " */",
        f"export const {name} = ({{",
        "  className = '',",
    ])
    for prop, default in component.text_props:
        lines.append(f"  {prop} = {js_string(default)},")
    if component.has_assets:
        lines.append("  imageSrc = null,")
        lines.append("  imageAlt = null,")
    lines.extend([
        "  ...props",
        "}) => {",
        "  return (",
        f"    <div className={{`{component_class} ${{className}}`.trim()}} {{...props}}>",
    ])
    for child in top_level_nodes(component):
        lines.extend(_render_jsx(child, asset_map, primary_id, 3))
    lines.extend([
        "    </div>",
        "  );",
        "};",
        "",
        f"export default {name};",
        "",
    ])
    return "\n".join(lines)


# ════════════════════════════════════════════════════════════
# Style sheet (SCSS, BEM)
# ════════════════════════════════════════════════════════════

def _layout_declarations(style: StyleRecord) -> List[str]:
    decls = []
    if style.display:
        decls.append(f"display: {style.display};")
        decls.append(f"flex-direction: {style.direction};")
        decls.append(f"align-items: {CSS_ALIGN[style.align]};")
        decls.append(f"justify-content: {CSS_ALIGN[style.justify]};")
    if style.gap is not None:
        decls.append(f"gap: {_px(style.gap)};")
    if style.padding is not None:
        p = style.padding
        decls.append(f"padding: {_px(p.top)} {_px(p.right)} {_px(p.bottom)} {_px(p.left)};")
    return decls


def _box_declarations(style: StyleRecord) -> List[str]:
    decls = []
    if style.flex_grow:
        decls.append("flex: 1;")
    if style.width:
        decls.append(f"width: {style.width};")
    if style.height:
        decls.append(f"height: {style.height};")
    if style.background_color:
        decls.append(f"background-color: {style.background_color};")
    if style.border_radius is not None:
        decls.append(f"border-radius: {_px(style.border_radius)};")
    return decls


def _text_declarations(style: StyleRecord) -> List[str]:
    text = style.text
    if text is None:
        return []
    decls = []
    if text.font_family:
        decls.append(f"font-family: '{text.font_family}', sans-serif;")
    if text.font_size is not None:
        decls.append(f"font-size: {_px(text.font_size)};")
    if text.font_weight is not None:
        decls.append(f"font-weight: {format_number(text.font_weight)};")
    if text.line_height is not None:
        decls.append(f"line-height: {_px(text.line_height)};")
    if text.letter_spacing is not None:
        decls.append(f"letter-spacing: {_px(text.letter_spacing)};")
    if text.color:
        decls.append(f"color: {text.color};")
    if text.text_align:
        decls.append(f"text-align: {text.text_align};")
    return decls


def element_declarations(node: AnnotatedNode, asset_map: Dict[str, AssetRecord]) -> List[str]:
    decls = _layout_declarations(node.style) + _box_declarations(node.style) + _text_declarations(node.style)
    if node.role.is_asset and _filename(node, asset_map):
        decls.append("flex-shrink: 0;")
    return decls


def render_stylesheet(component: AnnotatedComponent, asset_map: Dict[str, AssetRecord]) -> str:
    root = component.root
    source = component.source
    decls = _layout_declarations(root.style) + _box_declarations(root.style) + _text_declarations(root.style)

    out = ["@use '../variables' as *;", "", f".{component.component_class} {{"]
    out.extend(f"  {decl}" for decl in decls)

    elements = list(component.elements())
    for node in elements:
        out.append("")
        out.append(f"  &__{node.identifier.element_class} {{")
        out.extend(f"    {decl}" for decl in element_declarations(node, asset_map))
        out.append("  }")

    width = format_number(source.width) if source.width is not None else "auto"
    height = format_number(source.height) if source.height is not None else "auto"
    label = " ".join(source.name.split())
    out.extend([
        "",
        f"  // Figma component: {label}",
        f"  // Original size: {width}x{height}",
        f"  // Child elements: {len(elements)}",
        "}",
        "",
    ])
    return "\n".join(out)


# ════════════════════════════════════════════════════════════
# Catalog (Storybook CSF)
# ════════════════════════════════════════════════════════════

def catalog_arg_types(component: AnnotatedComponent) -> dict:
    arg_types = {
        "className": {"control": "text", "description": "Additional CSS classes"},
    }
    for index, (prop, _) in enumerate(component.text_props, start=1):
        arg_types[prop] = {"control": "text", "description": f"Text content {index}"}
    if component.has_assets:
        arg_types["imageSrc"] = {"control": "text", "description": "Image source URL"}
        arg_types["imageAlt"] = {"control": "text", "description": "Image alt text"}
    return arg_types


def _story(name: str, args: List[tuple]) -> List[str]:
    lines = ["", f"export const {name} = Template.bind({{}});"]
    if not args:
        lines.append(f"{name}.args = {{}};")
        return lines
    lines.append(f"{name}.args = {{")
    lines.extend(f"  {key}: {js_string(value)}," for key, value in args)
    lines.append("};")
    return lines


def render_catalog(component: AnnotatedComponent, asset_map: Dict[str, AssetRecord]) -> str:
    name = component.name
    arg_types = json.dumps(catalog_arg_types(component), indent=4, ensure_ascii=False)
    lines = [
        "import React from 'react';",
        f"import {{ {name} }} from './{name}';",
        "",
        "/**",
        f" * {name} Component Stories",
        " * Auto-generated from Figma",
        " */",
        "export default {",
        f"  title: 'Components/{name}',",
        f"  component: {name},",
        "  parameters: {",
        "    docs: {",
        "      description: {",
        f"        component: {js_string(display_text(component))},",
        "      },",
        "    },",
        "  },",
        f"  argTypes: {arg_types},",
        "};",
        "",
        f"const Template = (args) => <{name} {{...args}} />;",
    ]
    lines.extend(_story("Default", list(component.text_props)))
    if component.has_assets:
        lines.extend(_story("WithImage", [
            ("imageSrc", PLACEHOLDER_IMAGE),
            ("imageAlt", f"{name} image"),
        ]))
    lines.extend(_story("WithCustomClass", [("className", "custom-variant")]))
    lines.append("")
    return "\n".join(lines)


# ════════════════════════════════════════════════════════════
# Twig (Drupal)
# ════════════════════════════════════════════════════════════

def _render_twig(node: AnnotatedNode, asset_map: Dict[str, AssetRecord], assets_path: str, indent: int) -> List[str]:
    pad = "  " * indent
    class_attr = f"{{{{ base_class }}}}__{node.identifier.element_class}"

    if node.role.is_asset:
        filename = _filename(node, asset_map)
        if filename:
            src = f"{{{{ file_url('{assets_path}/{filename}') }}}}"
            return [f"{pad}<img src=\"{src}\" alt=\"{_attr(_alt_text(node))}\" class=\"{class_attr}\" />"]
        return [f"{pad}<div class=\"{class_attr}\"></div>"]

    if node.role is NodeRole.TEXT:
        return [f"{pad}<span class=\"{class_attr}\">{{{{ content.field_{node.text_prop} }}}}</span>"]

    if node.role is NodeRole.CONTAINER and node.children:
        lines = [f"{pad}<div class=\"{class_attr}\">"]
        for child in node.children:
            lines.extend(_render_twig(child, asset_map, assets_path, indent + 1))
        lines.append(f"{pad}</div>")
        return lines

    return [f"{pad}<div class=\"{class_attr}\"></div>"]


def render_twig(component: AnnotatedComponent, asset_map: Dict[str, AssetRecord], assets_path: str = "assets/figma") -> str:
    component_class = component.component_class
    lines = [
        f"{{{{ attach_library('frontend/{component_class}') }}}}",
        "",
        f"{{% set base_class = '{component_class}' %}}",
        "",
        "<div class=\"{{ base_class }}\">",
    ]
    for child in top_level_nodes(component):
        lines.extend(_render_twig(child, asset_map, assets_path, 1))
    lines.append("</div>")
    lines.append("")
    return "\n".join(lines)
