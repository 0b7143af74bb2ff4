"""设置记录的加载、校验、规范化与落盘。"""

from __future__ import annotations

import json
import math
from pathlib import Path

from .constants import (
    DEFAULT_PROXY_HOST,
    DEFAULT_PROXY_PORT,
    DEFAULT_SETTINGS,
    MAX_PORT,
    MODE_ALL,
    MODE_SELECTED,
)
from .models import NormalizedSettings
from .normalize import describe_duplicates, normalize_entry, parse_domain_list, rejected_entries

LIST_KEYS = ("includeSites", "bypassSites")


def _port_number(value: object) -> int | None:
    """把端口值转换为整数；无法转换或越界时返回 None。"""

    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    port = math.floor(number)
    if port <= 0 or port > MAX_PORT:
        return None
    return port


def coerce_port(value: object) -> int:
    """端口不合法时回落到默认端口 10808。"""

    port = _port_number(value)
    return DEFAULT_PROXY_PORT if port is None else port


def coerce_mode(value: object) -> str:
    """只有明确写 `all` 才是全局模式，其余回落到更保守的 `selected`。"""

    if isinstance(value, str) and value.strip().lower() == MODE_ALL:
        return MODE_ALL
    return MODE_SELECTED


def with_defaults(data: dict) -> dict:
    """缺失字段按默认值补齐，列表字段做浅拷贝，避免共享默认列表。"""

    merged = {**DEFAULT_SETTINGS, **(data or {})}
    for key in LIST_KEYS:
        value = merged.get(key)
        merged[key] = list(value) if isinstance(value, list) else value
    return merged


def load_settings(path: Path) -> dict:
    """加载设置 JSON。

    约束文件必须是对象；结构异常直接抛错，防止后续静默生成不完整的 PAC。
    """

    with path.open("r", encoding="utf-8") as fp:
        data = json.load(fp)
    if not isinstance(data, dict):
        raise ValueError("设置文件不是 JSON 对象")
    return with_defaults(data)


def save_settings(path: Path, settings: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


def validate_settings(data: dict) -> tuple[list[str], list[str]]:
    """校验设置结构，提前暴露问题。

    这里只做结构与取值检查，不改写输入；可回落的取值只给 warning。
    """

    errors: list[str] = []
    warnings: list[str] = []

    for key in LIST_KEYS:
        value = data.get(key)
        if value is not None and not isinstance(value, list):
            errors.append(f"`{key}` 必须是数组或 null。")

    enabled = data.get("enabled", False)
    if not isinstance(enabled, bool):
        warnings.append("`enabled` 非布尔值，将按 Python bool 规则处理。")

    host = data.get("proxyHost", DEFAULT_PROXY_HOST)
    if host is not None and not isinstance(host, str):
        warnings.append("`proxyHost` 不是字符串，将按字符串处理。")

    mode = data.get("mode", MODE_SELECTED)
    if mode not in (MODE_SELECTED, MODE_ALL):
        warnings.append(f"非规范的 mode=`{mode}`，已按 {coerce_mode(mode)} 处理。")

    return errors, warnings


def normalize_settings(data: dict) -> NormalizedSettings:
    """执行一次“编辑/导入 -> 保存”的规范化。

    - 代理主机按主机规则清洗（不归约根域）；无效时报错；
    - 端口必须在 1-65535；
    - include 只接受主机，bypass 额外接受 `.suffix`；两者都保留用户输入的精确主机，
      PAC 生成阶段再按需归约；
    - 列表按最后一次出现去重，并报告重复项与无法识别的输入。
    """

    merged = with_defaults(data)
    errors: list[str] = []
    warnings: list[str] = []

    host_input = str(merged.get("proxyHost") or "").strip() or DEFAULT_PROXY_HOST
    proxy_host = normalize_entry(host_input, allow_suffix_rule=False, reduce_to_root=False)
    if not proxy_host:
        errors.append(f"代理主机无效：`{host_input}`，PAC 将回落到 {DEFAULT_PROXY_HOST}。")

    proxy_port = _port_number(merged.get("proxyPort"))
    if proxy_port is None:
        errors.append(f"端口无效：`{merged.get('proxyPort')}`，PAC 将回落到 {DEFAULT_PROXY_PORT}。")

    include_raw = merged["includeSites"] if isinstance(merged.get("includeSites"), list) else []
    bypass_raw = merged["bypassSites"] if isinstance(merged.get("bypassSites"), list) else []
    include_parsed = parse_domain_list(
        "\n".join(str(item) for item in include_raw if item is not None),
        allow_suffix_rule=False,
        reduce_to_root=False,
    )
    bypass_parsed = parse_domain_list(
        "\n".join(str(item) for item in bypass_raw if item is not None),
        allow_suffix_rule=True,
        reduce_to_root=False,
    )

    rejected = rejected_entries(include_raw, allow_suffix_rule=False)
    rejected += rejected_entries(bypass_raw, allow_suffix_rule=True)
    for item in rejected:
        warnings.append(f"无法识别的条目已丢弃：`{item}`。")
    if include_parsed.duplicates:
        warnings.append("includeSites " + describe_duplicates(include_parsed.duplicates))
    if bypass_parsed.duplicates:
        warnings.append("bypassSites " + describe_duplicates(bypass_parsed.duplicates))

    settings = {
        "enabled": bool(merged.get("enabled")),
        "proxyHost": proxy_host or host_input,
        "proxyPort": proxy_port if proxy_port is not None else merged.get("proxyPort"),
        "mode": coerce_mode(merged.get("mode")),
        "includeSites": include_parsed.items,
        "bypassSites": bypass_parsed.items,
    }
    return NormalizedSettings(
        settings=settings,
        errors=errors,
        warnings=warnings,
        include_duplicates=include_parsed.duplicates,
        bypass_duplicates=bypass_parsed.duplicates,
        rejected=rejected,
    )


def fingerprint_settings(settings: dict) -> str:
    """设置内容指纹，用于跳过内容未变化的重复写入。"""

    merged = with_defaults(settings)
    return json.dumps(
        {
            "enabled": bool(merged.get("enabled")),
            "proxyHost": merged.get("proxyHost") or DEFAULT_PROXY_HOST,
            "proxyPort": merged.get("proxyPort"),
            "mode": merged.get("mode"),
            "includeSites": list(merged.get("includeSites") or []),
            "bypassSites": list(merged.get("bypassSites") or []),
        },
        ensure_ascii=False,
        sort_keys=True,
    )
