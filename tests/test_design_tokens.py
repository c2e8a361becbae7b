"""
Design tokens 測試：variables 分類、alias 解析、文件樹 fallback 與 SCSS 輸出。
"""
from unittest.mock import MagicMock

import requests

from figma_codegen.design_tokens import (
    EMPTY_VARIABLES,
    DesignTokens,
    collect_tree_tokens,
    extract_tokens,
    fetch_variables,
    render_tokens_scss,
    render_variables_scss,
    token_name,
)
from figma_codegen.figma_reader import read_node


def _variable(name, resolved_type, value):
    return {"name": name, "resolvedType": resolved_type, "valuesByMode": {"m1": value}}


def _payload(**variables):
    return {"meta": {"variables": variables, "variableCollections": {}}}


def test_token_name():
    assert token_name("Color/Primary 500") == "color-primary-500"
    assert token_name("spacing md") == "spacing-md"


def test_extract_tokens_categories():
    tokens = extract_tokens(_payload(
        a=_variable("Brand", "COLOR", {"r": 1, "g": 0, "b": 0, "a": 1}),
        b=_variable("Overlay", "COLOR", {"r": 0, "g": 0, "b": 0, "a": 0.5}),
        c=_variable("spacing/md", "FLOAT", 16),
        d=_variable("font-size/lg", "FLOAT", 20),
        e=_variable("z index", "FLOAT", 10),
        f=_variable("font family", "STRING", "Inter"),
        g=_variable("label", "STRING", "hi"),
    ))
    assert tokens.colors == {"brand": "rgb(255, 0, 0)", "overlay": "rgba(0, 0, 0, 0.5)"}
    assert tokens.spacing == {"spacing-md": "16px"}
    assert tokens.typography == {"font-size-lg": "20px", "font-family": '"Inter"'}
    assert tokens.other == {"z-index": "10", "label": '"hi"'}


def test_alias_is_resolved():
    tokens = extract_tokens(_payload(
        base=_variable("blue", "COLOR", {"r": 0, "g": 0, "b": 1, "a": 1}),
        alias=_variable("primary", "COLOR", {"type": "VARIABLE_ALIAS", "id": "base"}),
    ))
    assert tokens.colors["primary"] == "rgb(0, 0, 255)"


def test_alias_cycle_is_dropped():
    tokens = extract_tokens(_payload(
        a=_variable("a", "COLOR", {"type": "VARIABLE_ALIAS", "id": "b"}),
        b=_variable("b", "COLOR", {"type": "VARIABLE_ALIAS", "id": "a"}),
    ))
    assert tokens.is_empty()


def test_fetch_variables_failure_returns_empty():
    client = MagicMock()
    client.get_local_variables.side_effect = requests.HTTPError("403 Forbidden")
    assert fetch_variables(client, "KEY") == EMPTY_VARIABLES
    assert extract_tokens(EMPTY_VARIABLES).is_empty()


def test_collect_tree_tokens():
    root = read_node({
        "id": "0:1", "name": "Page", "type": "CANVAS",
        "children": [
            {"id": "1:1", "name": "Box", "type": "FRAME",
             "fills": [{"type": "SOLID", "color": {"r": 1, "g": 1, "b": 1, "a": 1}}]},
            {"id": "1:2", "name": "T", "type": "TEXT", "characters": "x",
             "style": {"fontSize": 14, "fontFamily": "Inter"},
             "fills": [{"type": "SOLID", "color": {"r": 1, "g": 1, "b": 1, "a": 1}}]},
        ],
    })
    tokens = collect_tree_tokens(root)
    assert tokens.colors == {"color-1": "rgb(255, 255, 255)"}
    assert tokens.typography == {"font-size-14": "14px", "font-family-1": '"Inter"'}
    assert tokens.count() == 3


def test_render_tokens_scss():
    scss = render_tokens_scss(DesignTokens(colors={"brand": "rgb(1, 2, 3)"}, spacing={"gap": "8px"}))
    assert ":root {" in scss
    assert "  --brand: rgb(1, 2, 3);" in scss
    assert "  --gap: 8px;" in scss
    assert "$brand: rgb(1, 2, 3);" in scss
    assert "// Typography" not in scss


def test_render_variables_scss():
    assert "@use '../styles/tokens';" in render_variables_scss()
    assert "@use '../../theme/tokens';" in render_variables_scss("../../theme/tokens")
