"""
figma-codegen — Figma → design tokens / assets / React components（Python 管線）

讀取 Figma 文件，產生 SCSS tokens、SVG / PNG 資產，以及每個組件的
React 模板、BEM SCSS 與 Storybook stories（可選 Drupal Twig）。
"""

__version__ = "0.1.0"

from .naming_engine import (
    NamingConfig,
    ElementNamer,
    ComponentNamer,
    to_identifier,
    to_component_name,
    preview_naming_tree,
)
from .classifier import Classifier, classify, export_format
from .style_extractor import extract_style, extract_text_style
from .figma_reader import FigmaAPIClient, read_document
from .annotator import ComponentAnnotator, annotate_component
from .assets import AssetExporter, export_assets
from .emitters import render_catalog, render_stylesheet, render_template, render_twig
from .design_tokens import extract_tokens, render_tokens_scss
from .writer import IdempotentWriter
from .config import ConfigurationError, Settings, load_config, resolve_settings, validate_config
from .generator import SyncOptions, SyncReport, find_components, run_sync

__all__ = [
    "__version__",
    "NamingConfig",
    "ElementNamer",
    "ComponentNamer",
    "to_identifier",
    "to_component_name",
    "preview_naming_tree",
    "Classifier",
    "classify",
    "export_format",
    "extract_style",
    "extract_text_style",
    "FigmaAPIClient",
    "read_document",
    "ComponentAnnotator",
    "annotate_component",
    "AssetExporter",
    "export_assets",
    "render_template",
    "render_stylesheet",
    "render_catalog",
    "render_twig",
    "extract_tokens",
    "render_tokens_scss",
    "IdempotentWriter",
    "ConfigurationError",
    "Settings",
    "load_config",
    "resolve_settings",
    "validate_config",
    "SyncOptions",
    "SyncReport",
    "find_components",
    "run_sync",
]
