"""
命名引擎單元測試
組件名稱（PascalCase、全域唯一）與元素 class（slug、組件內唯一、前序先到先得）。
"""
import pytest
from figma_codegen.naming_engine import (
    ComponentNamer,
    ElementNamer,
    NamingConfig,
    preview_naming_tree,
    to_component_name,
    to_identifier,
)


# ─── to_identifier ──────────────────────────────────────────────────────────

@pytest.mark.parametrize("label,expected", [
    ("User Card!!", "user-card"),
    ("Icon", "icon"),
    ("  Hero   Title ", "-hero-title-"),
    ("btn_primary", "btn_primary"),
    ("頭像", ""),
])
def test_to_identifier(label, expected):
    assert to_identifier(label) == expected


@pytest.mark.parametrize("label", ["User Card!!", "Nav / Item 2", "a--b__c", "ÀBC def", ""])
def test_to_identifier_is_idempotent(label):
    once = to_identifier(label)
    assert to_identifier(once) == once


# ─── to_component_name ──────────────────────────────────────────────────────

def test_component_name_pascal_case():
    assert to_component_name("User Card!!") == "UserCard"
    assert to_component_name("button/primary") == "ButtonPrimary"
    assert to_component_name("HEADER") == "Header"


# ─── ElementNamer ───────────────────────────────────────────────────────────

class TestElementNamer:
    def test_collisions_get_numeric_suffix(self):
        namer = ElementNamer()
        assert namer.resolve("Icon") == "icon"
        assert namer.resolve("Icon") == "icon-1"
        assert namer.resolve("icon") == "icon-2"

    def test_empty_slug_falls_back_to_position(self):
        namer = ElementNamer()
        namer.resolve("Title")
        assert namer.resolve("!!!") == "el-2"

    def test_suffix_does_not_clash_with_literal_name(self):
        namer = ElementNamer()
        assert namer.resolve("icon-1") == "icon-1"
        assert namer.resolve("Icon") == "icon"
        assert namer.resolve("Icon") == "icon-2"

    def test_used_names_are_unique(self):
        namer = ElementNamer()
        results = [namer.resolve(label) for label in ["A", "a", "A", "", "", "b"]]
        assert len(results) == len(set(results))
        assert namer.used == frozenset(results)

    def test_custom_fallback(self):
        cfg = NamingConfig(fallback_element="node")
        assert ElementNamer(cfg).resolve("") == "node-1"


# ─── ComponentNamer ─────────────────────────────────────────────────────────

class TestComponentNamer:
    def test_duplicates_get_counter_from_two(self):
        namer = ComponentNamer()
        assert namer.resolve("Header") == "Header"
        assert namer.resolve("Header") == "Header2"
        assert namer.resolve("header") == "Header3"

    def test_empty_name_uses_fallback(self):
        assert ComponentNamer().resolve("***") == "Unnamed"

    def test_leading_digit_gets_prefix(self):
        assert ComponentNamer().resolve("404 page") == "Component404Page"

    def test_case_insensitive_collision(self):
        # "Usercard" 與 "UserCard" 的 class 都是 usercard
        namer = ComponentNamer()
        assert namer.resolve("UserCard") == "Usercard"
        assert namer.resolve("User card") == "UserCard2"

    @pytest.mark.parametrize("label,expected", [
        ("Default", "Default2"),
        ("template", "Template2"),
        ("React", "React2"),
        ("with image", "WithImage2"),
    ])
    def test_story_identifiers_are_reserved(self, label, expected):
        assert ComponentNamer().resolve(label) == expected

    def test_default_component_catalog_declares_name_once(self):
        from figma_codegen.annotator import annotate_component
        from figma_codegen.emitters import render_catalog
        from figma_codegen.figma_reader import read_node

        name = ComponentNamer().resolve("Default")
        node = read_node({"id": "1:1", "name": "Default", "type": "COMPONENT"})
        stories = render_catalog(annotate_component(node, name), {})
        assert "import { Default2 } from './Default2';" in stories
        assert stories.count("export const Default ") == 1


# ─── preview_naming_tree ────────────────────────────────────────────────────

def test_preview_naming_tree_lists_classes_and_props():
    from figma_codegen.annotator import annotate_component
    from figma_codegen.figma_reader import read_node

    raw = {
        "id": "1:1", "name": "Card", "type": "COMPONENT",
        "children": [
            {"id": "1:2", "name": "Title", "type": "TEXT", "characters": "Hi"},
        ],
    }
    tree = preview_naming_tree(annotate_component(read_node(raw), "Card"))
    assert tree.splitlines()[0].startswith("Card")
    assert "card__title" in tree
    assert "{text1}" in tree
