"""
Generator — Figma document → tokens / assets / components.

Each component is annotated once, rendered into a GeneratedArtifactSet in
memory, and only then written (template, style sheet, stories, optional Twig).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .annotator import ComponentAnnotator
from .assets import build_asset_map, export_assets
from .config import Settings
from .design_tokens import (
    collect_tree_tokens,
    extract_tokens,
    fetch_variables,
    render_tokens_scss,
    render_variables_scss,
)
from .emitters import render_catalog, render_stylesheet, render_template, render_twig
from .figma_reader import read_document
from .models import (
    AnnotatedComponent,
    AssetRecord,
    DesignNode,
    FigmaDocument,
    GeneratedArtifactSet,
    NodeKind,
)
from .naming_engine import ComponentNamer, preview_naming_tree
from .writer import IdempotentWriter


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncOptions:
    tokens_only: bool = False
    components_only: bool = False
    assets_only: bool = False
    verbose: bool = False
    twig: bool = False

    @property
    def run_tokens(self) -> bool:
        return not self.components_only and not self.assets_only

    @property
    def run_components(self) -> bool:
        return not self.tokens_only and not self.assets_only

    @property
    def run_assets(self) -> bool:
        # 組件模板需要資產檔名，所以 components-only 也會匯出資產
        return not self.tokens_only


@dataclass
class SyncReport:
    document_name: str = ""
    token_count: int = 0
    components: List[str] = field(default_factory=list)
    assets: List[AssetRecord] = field(default_factory=list)
    files_written: int = 0
    files_skipped: int = 0

    @property
    def assets_exported(self) -> int:
        return sum(1 for record in self.assets if record.filename)

    @property
    def assets_failed(self) -> int:
        return len(self.assets) - self.assets_exported


def find_components(root: DesignNode) -> List[DesignNode]:
    """COMPONENT / COMPONENT_SET nodes, pre-order; a set and its variants are all included."""
    seen = set()
    components = []
    for node in root.walk():
        if node.kind is NodeKind.COMPONENT and node.id not in seen:
            seen.add(node.id)
            components.append(node)
    return components


def _posix_relpath(target: Path, start: Path) -> str:
    return Path(os.path.relpath(target, start)).as_posix()


def build_artifact_set(
    component: AnnotatedComponent,
    asset_map: Dict[str, AssetRecord],
    settings: Settings,
    twig: bool = False,
) -> GeneratedArtifactSet:
    component_dir = settings.components_dir / component.name
    assets_import = _posix_relpath(settings.assets_dir, component_dir)
    return GeneratedArtifactSet(
        component_name=component.name,
        template=render_template(component, asset_map, assets_import),
        stylesheet=render_stylesheet(component, asset_map),
        catalog=render_catalog(component, asset_map),
        twig=render_twig(component, asset_map) if twig else None,
    )


def write_artifact_set(artifacts: GeneratedArtifactSet, settings: Settings, writer: IdempotentWriter) -> None:
    name = artifacts.component_name
    component_dir = settings.components_dir / name
    writer.write_text(component_dir / f"{name}.jsx", artifacts.template)
    writer.write_text(component_dir / f"{name}.scss", artifacts.stylesheet)
    writer.write_text(component_dir / f"{name}.stories.jsx", artifacts.catalog)
    if artifacts.twig is not None:
        writer.write_text(settings.twig_dir / f"{name}.html.twig", artifacts.twig)


def generate_components(
    root: DesignNode,
    asset_map: Dict[str, AssetRecord],
    settings: Settings,
    writer: IdempotentWriter,
    twig: bool = False,
    annotator: Optional[ComponentAnnotator] = None,
) -> List[str]:
    logger.info("ℹ Finding components...")
    components = find_components(root)
    if not components:
        logger.warning("⚠ No components found in Figma file")
        return []
    logger.info("ℹ Found %d components", len(components))

    tokens_import = _posix_relpath(settings.tokens_dir / "tokens", settings.components_dir)
    writer.write_text(settings.components_dir / "_variables.scss", render_variables_scss(tokens_import))

    annotator = annotator or ComponentAnnotator()
    namer = ComponentNamer(annotator.naming)
    names = []
    for node in components:
        name = namer.resolve(node.name)
        annotated = annotator.annotate(node, name)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Naming tree:\n%s", preview_naming_tree(annotated))
        artifacts = build_artifact_set(annotated, asset_map, settings, twig=twig)
        write_artifact_set(artifacts, settings, writer)
        logger.debug("Generated component: %s", name)
        names.append(name)
    return names


def sync_tokens(client, settings: Settings, document: FigmaDocument, writer: IdempotentWriter) -> int:
    tokens = extract_tokens(fetch_variables(client, settings.file_key))
    for style_id, style in document.styles.items():
        logger.debug("Found %s style: %s (%s)", style.get("styleType", "?").lower(), style.get("name", ""), style_id)
    if tokens.is_empty():
        logger.info("ℹ No variables found, collecting tokens from the document tree")
        tokens = collect_tree_tokens(document.root)
    writer.write_text(settings.tokens_dir / "_tokens.scss", render_tokens_scss(tokens))
    return tokens.count()


def run_sync(
    client,
    settings: Settings,
    options: SyncOptions,
    writer: Optional[IdempotentWriter] = None,
) -> SyncReport:
    """執行一次同步；文件取得失敗（requests.RequestException）直接往上拋."""
    writer = writer or IdempotentWriter(settings.root_dir)

    logger.info("ℹ Fetching Figma file...")
    document = read_document(client.get_file(settings.file_key))
    logger.info("✓ Fetched file: %s", document.name)
    report = SyncReport(document_name=document.name)

    if options.run_tokens:
        report.token_count = sync_tokens(client, settings, document, writer)

    asset_map: Dict[str, AssetRecord] = {}
    if options.run_assets:
        report.assets = export_assets(document.root, client, settings, writer)
        asset_map = build_asset_map(report.assets)

    if options.run_components:
        report.components = generate_components(document.root, asset_map, settings, writer, twig=options.twig)

    report.files_written = len(writer.written)
    report.files_skipped = len(writer.skipped)
    return report
