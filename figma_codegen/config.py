"""設定檔載入、.env 讀取與基本驗證."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "figma-codegen.config.json"

# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"figma", "output", "export"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "figma": {"personalAccessToken", "fileKey", "timeout"},
    "output": {"root", "tokens", "assets", "components", "twig"},
    "export": {"batchSize", "rasterScale", "downloadWorkers"},
}

_NUMERIC_KEYS = {
    ("figma", "timeout"),
    ("export", "batchSize"),
    ("export", "rasterScale"),
    ("export", "downloadWorkers"),
}


class ConfigurationError(ValueError):
    """缺少憑證等無法繼續執行的設定錯誤."""


@dataclass(frozen=True)
class Settings:
    figma_token: str
    file_key: str
    root_dir: Path
    tokens_dir: Path
    assets_dir: Path
    components_dir: Path
    twig_dir: Path
    timeout: float = 30.0
    batch_size: int = 100
    raster_scale: float = 2
    download_workers: int = 8


def _warn(msg: str) -> None:
    logger.warning("⚠ [config] %s", msg)


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，記錄警告但不拋例外。"""
    if not cfg:
        return

    # 頂層未知欄位
    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）")

    # 各區塊欄位
    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            _warn(f"[{section}] 應為 JSON 物件，目前是 {type(section_cfg).__name__}")
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）")

    # 數值欄位類型
    for section, key in _NUMERIC_KEYS:
        section_cfg = cfg.get(section)
        if not isinstance(section_cfg, dict):
            continue
        val = section_cfg.get(key)
        if val is not None and (isinstance(val, bool) or not isinstance(val, (int, float))):
            _warn(f"{section}.{key} 應為數字，目前是 {type(val).__name__}")

    batch_size = (cfg.get("export") or {}).get("batchSize")
    if isinstance(batch_size, int) and batch_size > 100:
        _warn(f"export.batchSize {batch_size} 超過建議上限 100，Figma 可能拒絕過長的 ids 參數")


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """載入 JSON 設定檔，不存在則回傳空 dict；存在則做基本驗證。"""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        _warn(f"'{config_path}' 格式錯誤，應為 JSON 物件，回傳空設定。")
        return {}
    validate_config(cfg)
    return cfg


def load_env(env_path: Optional[str] = None) -> None:
    """讀取 .env（不覆寫已存在的環境變數）."""
    load_dotenv(env_path or Path.cwd() / ".env", override=False)


def _number(section: dict, key: str, default, cast):
    val = section.get(key)
    if val is None or isinstance(val, bool) or not isinstance(val, (int, float)):
        return default
    return cast(val)


def resolve_settings(
    config: dict,
    env: Optional[Mapping[str, str]] = None,
    file_key: Optional[str] = None,
    output_root: Optional[str] = None,
) -> Settings:
    """合併 config / 環境變數 / CLI 參數。缺 token 或 file key 時拋出 ConfigurationError。"""
    env = os.environ if env is None else env
    figma_cfg = config.get("figma") or {}
    output_cfg = config.get("output") or {}
    export_cfg = config.get("export") or {}

    token = figma_cfg.get("personalAccessToken") or env.get("FIGMA_TOKEN")
    key = file_key or figma_cfg.get("fileKey") or env.get("FIGMA_FILE_KEY")
    if not token:
        raise ConfigurationError(
            "FIGMA_TOKEN 未設定：請寫入 .env，或在 figma-codegen.config.json 的 figma.personalAccessToken 設定。"
        )
    if not key:
        raise ConfigurationError(
            "FIGMA_FILE_KEY 未設定：請使用 --file-key、寫入 .env，或在 config 的 figma.fileKey 設定。"
        )

    root = Path(output_root or output_cfg.get("root") or ".")
    return Settings(
        figma_token=token,
        file_key=key,
        root_dir=root,
        tokens_dir=root / output_cfg.get("tokens", "src/styles"),
        assets_dir=root / output_cfg.get("assets", "src/assets/figma"),
        components_dir=root / output_cfg.get("components", "src/components"),
        twig_dir=root / output_cfg.get("twig", "twig-templates"),
        timeout=_number(figma_cfg, "timeout", 30.0, float),
        batch_size=max(1, _number(export_cfg, "batchSize", 100, int)),
        raster_scale=_number(export_cfg, "rasterScale", 2, float),
        download_workers=max(1, _number(export_cfg, "downloadWorkers", 8, int)),
    )
