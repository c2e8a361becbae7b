"""
Asset Pipeline — export vector / raster nodes from Figma and download them.

Partitions (SVG, PNG) run concurrently; the batches of one partition run
one after another so only one export request per format is in flight.
Downloads inside a resolved batch run concurrently. Every failure here is
logged and recovered: affected nodes keep ``filename=None``.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Optional

import requests

from .classifier import export_format, is_asset_candidate
from .models import AssetRecord, DesignNode, ExportFormat
from .naming_engine import to_identifier
from .writer import IdempotentWriter


logger = logging.getLogger(__name__)

BATCH_SIZE = 100

_ID_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_\-]")
_HANDLE_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9]")


def collect_asset_candidates(root: DesignNode) -> list:
    """Depth-first, pre-order."""
    candidates = []
    for node in root.walk():
        if is_asset_candidate(node):
            reason = "export settings" if node.export_settings else (
                "image fill" if node.has_image_fill else node.type)
            logger.debug("Found exportable: %s (%s)", node.name or "unnamed", reason)
            candidates.append(node)
    return candidates


def partition_candidates(nodes: Iterable[DesignNode]) -> dict:
    partitions: dict[ExportFormat, list] = {ExportFormat.SVG: [], ExportFormat.PNG: []}
    for node in nodes:
        partitions[export_format(node)].append(node)
    return partitions


def chunked(items: list, size: int) -> list:
    return [items[i:i + size] for i in range(0, len(items), size)]


def sanitize_node_id(node_id: str) -> str:
    return _ID_UNSAFE_RE.sub("-", node_id)


def asset_filename(node: DesignNode, fmt: ExportFormat) -> str:
    base = to_identifier(node.name) or "asset"
    return f"{base}-{sanitize_node_id(node.id)}.{fmt.value}"


def asset_handle(filename: str) -> str:
    """Import identifier for a filename: 'icon-1-2.svg' → 'icon_1_2_svg'."""
    handle = _HANDLE_UNSAFE_RE.sub("_", filename)
    if handle[:1].isdigit():
        handle = f"asset_{handle}"
    return handle


def build_asset_map(records: Iterable[AssetRecord]) -> dict:
    return {record.node_id: record for record in records}


class AssetExporter:

    def __init__(
        self,
        client,
        file_key: str,
        assets_dir,
        writer: Optional[IdempotentWriter] = None,
        batch_size: int = BATCH_SIZE,
        raster_scale: float = 2,
        max_workers: int = 8,
    ):
        self.client = client
        self.file_key = file_key
        self.assets_dir = Path(assets_dir)
        self.writer = writer or IdempotentWriter()
        self.batch_size = batch_size
        self.raster_scale = raster_scale
        self.max_workers = max_workers

    def export(self, root: DesignNode) -> list:
        logger.info("ℹ Finding exportable images...")
        candidates = collect_asset_candidates(root)
        if not candidates:
            logger.warning("⚠ No exportable images found")
            return []

        partitions = partition_candidates(candidates)
        logger.info(
            "ℹ Found %d exportable nodes (vectors: %d, images: %d)",
            len(candidates), len(partitions[ExportFormat.SVG]), len(partitions[ExportFormat.PNG]),
        )

        filenames: dict[str, str] = {}
        with ThreadPoolExecutor(max_workers=len(partitions)) as pool:
            futures = [
                pool.submit(self._export_partition, fmt, nodes)
                for fmt, nodes in partitions.items()
                if nodes
            ]
            for future in futures:
                filenames.update(future.result())

        records = [
            AssetRecord(
                node_id=node.id,
                name=node.name,
                node_type=node.type,
                has_image_fill=node.has_image_fill,
                export_format=export_format(node),
                filename=filenames.get(node.id),
            )
            for node in candidates
        ]
        missing = sum(1 for r in records if r.filename is None)
        if missing:
            logger.warning("⚠ %d of %d assets were not exported; re-run with --assets-only to retry", missing, len(records))
        return records

    def _export_partition(self, fmt: ExportFormat, nodes: list) -> dict:
        batches = chunked(nodes, self.batch_size)
        label = fmt.value.upper()
        filenames: dict[str, str] = {}
        for index, batch in enumerate(batches, start=1):
            logger.info("ℹ Exporting %s batch %d/%d...", label, index, len(batches))
            try:
                urls = self.client.get_image_urls(
                    self.file_key,
                    [node.id for node in batch],
                    format=fmt.value,
                    scale=self.raster_scale if fmt is ExportFormat.PNG else None,
                )
            except (requests.RequestException, ValueError) as e:
                logger.warning(
                    "⚠ Failed to export %s batch %d/%d (%s ... %s): %s",
                    label, index, len(batches), batch[0].id, batch[-1].id, e,
                )
                continue
            filenames.update(self._download_batch(batch, urls, fmt))
        return filenames

    def _download_batch(self, batch: list, urls: dict, fmt: ExportFormat) -> dict:
        jobs = []
        for node in batch:
            url = urls.get(node.id)
            if not url:
                logger.warning("⚠ No image URL for node: %s (%s)", node.name, node.id)
                continue
            jobs.append((node, url))
        if not jobs:
            return {}

        filenames = {}
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(jobs))) as pool:
            results = pool.map(lambda job: self._download(job[0], job[1], fmt), jobs)
            for (node, _), filename in zip(jobs, results):
                if filename:
                    filenames[node.id] = filename
        return filenames

    def _download(self, node: DesignNode, url: str, fmt: ExportFormat) -> Optional[str]:
        filename = asset_filename(node, fmt)
        try:
            payload = self.client.download(url)
            self.writer.write_bytes(self.assets_dir / filename, payload)
        except (requests.RequestException, OSError) as e:
            logger.warning("⚠ Failed to download %s (%s): %s", node.name, node.id, e)
            return None
        logger.debug("Downloaded: %s", filename)
        return filename


def export_assets(root: DesignNode, client, settings, writer: Optional[IdempotentWriter] = None) -> list:
    exporter = AssetExporter(
        client,
        settings.file_key,
        settings.assets_dir,
        writer=writer,
        batch_size=settings.batch_size,
        raster_scale=settings.raster_scale,
        max_workers=settings.download_workers,
    )
    return exporter.export(root)
