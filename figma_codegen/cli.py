#!/usr/bin/env python3
"""
figma-codegen CLI — Figma → design tokens / assets / React components

  figma-codegen                      # tokens + assets + components
  figma-codegen --tokens-only        # 只產生 _tokens.scss
  figma-codegen --components-only    # 組件（仍會匯出組件用到的資產）
  figma-codegen --assets-only        # 只匯出 SVG / PNG
  figma-codegen --twig               # 額外輸出 Drupal Twig 模板
"""

import argparse
import logging
import sys

import requests

from . import __version__
from .config import DEFAULT_CONFIG_PATH, ConfigurationError, load_config, load_env, resolve_settings
from .figma_reader import FigmaAPIClient
from .generator import SyncOptions, run_sync


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )
    # urllib3 的連線細節不輸出
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figma-codegen",
        description="Figma → SCSS tokens, assets and React components with Storybook stories",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--tokens-only", action="store_true", help="Only generate design tokens")
    mode.add_argument("--components-only", action="store_true", help="Only generate components (exports their assets)")
    mode.add_argument("--assets-only", action="store_true", help="Only export image assets")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    parser.add_argument("--file-key", help="Figma file key (overrides FIGMA_FILE_KEY)")
    parser.add_argument("--output", help="Output root directory")
    parser.add_argument("--twig", action="store_true", help="Also write Drupal Twig templates")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _report_fetch_error(e: requests.RequestException, file_key: str) -> None:
    status = getattr(getattr(e, "response", None), "status_code", None)
    if status == 403:
        print("❌ Figma API 403：Token 無效或已過期，請重新產生 FIGMA_TOKEN。")
    elif status == 404:
        print(f"❌ Figma API 404：找不到檔案 '{file_key}'，請確認 file key 是否正確。")
    else:
        print(f"❌ Figma API 錯誤：{e}")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    options = SyncOptions(
        tokens_only=args.tokens_only,
        components_only=args.components_only,
        assets_only=args.assets_only,
        verbose=args.verbose,
        twig=args.twig,
    )
    configure_logging(options.verbose)

    load_env()
    config = load_config(args.config)
    try:
        settings = resolve_settings(config, file_key=args.file_key, output_root=args.output)
    except ConfigurationError as e:
        print(f"❌ {e}")
        print("   取得方式：Figma → Settings → Personal access tokens → 新增")
        return 1

    print(f"🚀 Starting Figma sync: {settings.file_key}")
    client = FigmaAPIClient(settings.figma_token, timeout=settings.timeout)
    try:
        report = run_sync(client, settings, options)
    except requests.RequestException as e:
        _report_fetch_error(e, settings.file_key)
        return 1
    except ValueError as e:
        print(f"❌ Sync failed: {e}")
        return 1

    if options.run_tokens:
        print(f"   🎨 Tokens: {report.token_count}")
    if options.run_assets:
        print(f"   🖼  Assets: {report.assets_exported}/{len(report.assets)} exported")
    if options.run_components:
        print(f"   🧩 Components: {len(report.components)}")
    print(f"   📄 Files written: {report.files_written}, unchanged: {report.files_skipped}")
    if report.assets_failed:
        print(f"⚠️ {report.assets_failed} asset(s) failed; re-run with --assets-only to retry.")
    print("✅ Figma sync completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
