"""
Classifier 單元測試：只看節點自身欄位決定角色與匯出格式。
"""
import pytest
from figma_codegen.classifier import Classifier, classify, export_format, is_asset_candidate
from figma_codegen.figma_reader import read_node
from figma_codegen.models import ExportFormat, NodeRole


def _make_node(**kwargs):
    base = {"id": "1:1", "name": "Node", "type": "FRAME", "children": []}
    base.update(kwargs)
    return read_node(base)


IMAGE_FILL = [{"type": "IMAGE", "imageRef": "abc"}]


@pytest.mark.parametrize("node_type", ["VECTOR", "BOOLEAN_OPERATION", "STAR", "ELLIPSE", "POLYGON", "LINE"])
def test_vector_types_are_svg_assets(node_type):
    node = _make_node(type=node_type)
    assert is_asset_candidate(node)
    assert export_format(node) is ExportFormat.SVG
    assert classify(node) is NodeRole.VECTOR_ASSET


def test_image_fill_wins_over_vector_type():
    node = _make_node(type="ELLIPSE", fills=IMAGE_FILL)
    assert export_format(node) is ExportFormat.PNG
    assert classify(node) is NodeRole.RASTER_ASSET


def test_frame_with_image_fill_is_raster_even_with_children():
    node = _make_node(fills=IMAGE_FILL, children=[{"id": "1:2", "name": "t", "type": "TEXT", "characters": "x"}])
    assert classify(node) is NodeRole.RASTER_ASSET


@pytest.mark.parametrize("fmt,expected", [
    ("SVG", ExportFormat.SVG),
    ("PNG", ExportFormat.PNG),
    ("JPG", ExportFormat.PNG),
    ("PDF", ExportFormat.PNG),
])
def test_export_settings_first_format(fmt, expected):
    node = _make_node(type="RECTANGLE", exportSettings=[{"format": fmt}, {"format": "SVG"}])
    assert export_format(node) is expected


def test_text_roles():
    assert classify(_make_node(type="TEXT", characters="Hello")) is NodeRole.TEXT
    assert classify(_make_node(type="TEXT", characters="")) is NodeRole.DECORATION


def test_container_and_shape():
    parent = _make_node(children=[{"id": "1:2", "name": "r", "type": "RECTANGLE"}])
    assert classify(parent) is NodeRole.CONTAINER
    assert classify(_make_node()) is NodeRole.SHAPE
    assert classify(_make_node(type="RECTANGLE")) is NodeRole.SHAPE


def test_non_visual_types_are_decoration():
    assert classify(_make_node(type="SLICE")) is NodeRole.DECORATION
    assert classify(_make_node(type="STICKY")) is NodeRole.DECORATION


def test_non_candidate_has_no_export_format():
    assert export_format(_make_node(type="RECTANGLE")) is None
    assert not is_asset_candidate(_make_node(type="RECTANGLE"))


def test_classifier_memoizes_by_id():
    classifier = Classifier()
    node = _make_node(type="VECTOR")
    assert classifier(node) is NodeRole.VECTOR_ASSET
    assert classifier(node) is NodeRole.VECTOR_ASSET
    assert len(classifier) == 1
