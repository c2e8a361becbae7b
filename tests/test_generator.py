"""
Generator / run_sync 整合測試（mock FigmaAPIClient，寫入 tmp_path）。
"""
from unittest.mock import MagicMock

import pytest
import requests

from figma_codegen.config import resolve_settings
from figma_codegen.figma_reader import read_node
from figma_codegen.generator import SyncOptions, find_components, run_sync
from figma_codegen.writer import IdempotentWriter


FILE_PAYLOAD = {
    "name": "Design System",
    "document": {
        "id": "0:0", "name": "Document", "type": "DOCUMENT",
        "children": [{
            "id": "0:1", "name": "Page 1", "type": "CANVAS",
            "children": [
                {
                    "id": "1:1", "name": "User Card!!", "type": "COMPONENT",
                    "layoutMode": "VERTICAL",
                    "children": [
                        {"id": "1:2", "name": "Title", "type": "TEXT", "characters": "Hello"},
                        {"id": "1:3", "name": "Avatar Image", "type": "RECTANGLE", "fills": [{"type": "IMAGE"}]},
                    ],
                },
                {
                    "id": "2:1", "name": "Button", "type": "COMPONENT_SET",
                    "children": [
                        {"id": "2:2", "name": "State=Default", "type": "COMPONENT", "children": [
                            {"id": "2:3", "name": "Icon", "type": "VECTOR"},
                        ]},
                    ],
                },
                {"id": "3:1", "name": "user card", "type": "COMPONENT"},
            ],
        }],
    },
}

VARIABLES_PAYLOAD = {
    "meta": {
        "variables": {
            "v1": {"name": "color/primary", "resolvedType": "COLOR",
                   "valuesByMode": {"m1": {"r": 0, "g": 0, "b": 1, "a": 1}}},
        },
        "variableCollections": {},
    },
}


def _client():
    client = MagicMock()
    client.get_file.return_value = FILE_PAYLOAD
    client.get_local_variables.return_value = VARIABLES_PAYLOAD
    client.get_image_urls.side_effect = lambda key, ids, format="png", scale=None: {
        node_id: f"https://s3/{node_id}" for node_id in ids
    }
    client.download.side_effect = lambda url: url.encode("utf-8")
    return client


@pytest.fixture
def settings(tmp_path):
    return resolve_settings({}, env={"FIGMA_TOKEN": "t", "FIGMA_FILE_KEY": "KEY"}, output_root=str(tmp_path))


def test_find_components_pre_order_includes_sets_and_variants():
    root = read_node(FILE_PAYLOAD["document"])
    assert [n.id for n in find_components(root)] == ["1:1", "2:1", "2:2", "3:1"]


class TestRunSync:
    def test_full_sync_writes_every_artifact(self, settings):
        report = run_sync(_client(), settings, SyncOptions())

        assert report.document_name == "Design System"
        assert report.components == ["UserCard", "Button", "StateDefault", "UserCard2"]
        assert report.token_count == 1
        assert report.assets_exported == 2
        comp_dir = settings.components_dir
        for name in report.components:
            assert (comp_dir / name / f"{name}.jsx").exists()
            assert (comp_dir / name / f"{name}.scss").exists()
            assert (comp_dir / name / f"{name}.stories.jsx").exists()
        assert (comp_dir / "_variables.scss").read_text(encoding="utf-8").count("@use '../styles/tokens';") == 1
        tokens = (settings.tokens_dir / "_tokens.scss").read_text(encoding="utf-8")
        assert "--color-primary: rgb(0, 0, 255);" in tokens
        assert not settings.twig_dir.exists()

    def test_second_run_writes_nothing(self, settings):
        run_sync(_client(), settings, SyncOptions())
        writer = IdempotentWriter(settings.root_dir)
        report = run_sync(_client(), settings, SyncOptions(), writer)
        assert writer.written == []
        assert report.files_written == 0
        assert report.files_skipped > 0

    def test_tokens_only(self, settings):
        client = _client()
        report = run_sync(client, settings, SyncOptions(tokens_only=True))
        assert report.components == []
        client.get_image_urls.assert_not_called()
        assert (settings.tokens_dir / "_tokens.scss").exists()

    def test_components_only_still_exports_assets(self, settings):
        client = _client()
        report = run_sync(client, settings, SyncOptions(components_only=True))
        client.get_local_variables.assert_not_called()
        assert client.get_image_urls.called
        jsx = (settings.components_dir / "UserCard" / "UserCard.jsx").read_text(encoding="utf-8")
        assert "from '../../assets/figma/avatar-image-1-3.png';" in jsx
        assert report.token_count == 0

    def test_assets_only(self, settings):
        report = run_sync(_client(), settings, SyncOptions(assets_only=True))
        assert report.components == []
        assert sorted(p.name for p in settings.assets_dir.iterdir()) == ["avatar-image-1-3.png", "icon-2-3.svg"]

    def test_twig_output(self, settings):
        run_sync(_client(), settings, SyncOptions(twig=True))
        twig = (settings.twig_dir / "UserCard.html.twig").read_text(encoding="utf-8")
        assert "{% set base_class = 'usercard' %}" in twig

    def test_asset_failure_is_not_fatal(self, settings):
        client = _client()
        client.get_image_urls.side_effect = requests.HTTPError("500")
        report = run_sync(client, settings, SyncOptions())
        assert report.assets_failed == 2
        jsx = (settings.components_dir / "UserCard" / "UserCard.jsx").read_text(encoding="utf-8")
        assert '<div className="usercard__avatar-image"></div>' in jsx

    def test_variables_failure_falls_back_to_tree_tokens(self, settings):
        client = _client()
        client.get_local_variables.side_effect = requests.HTTPError("403")
        report = run_sync(client, settings, SyncOptions(tokens_only=True))
        assert report.token_count == 0
        assert (settings.tokens_dir / "_tokens.scss").exists()

    def test_document_fetch_failure_propagates(self, settings):
        client = _client()
        client.get_file.side_effect = requests.HTTPError("404")
        with pytest.raises(requests.HTTPError):
            run_sync(client, settings, SyncOptions())
