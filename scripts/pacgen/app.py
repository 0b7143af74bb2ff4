"""PAC 生成器主流程。"""

from __future__ import annotations

import sys
from pathlib import Path

from .cli import parse_args
from .install import clear_pac_script, install_pac_script
from .listfile import export_lists, import_lists
from .pac import PacEmitError, build_pac_script
from .routing import build_routing_config, decide
from .settings import (
    fingerprint_settings,
    load_settings,
    normalize_settings,
    save_settings,
    validate_settings,
)


def _print_items(header: str, items: list[str]) -> None:
    print(header, file=sys.stderr)
    for item in items:
        print(f"  - {item}", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """脚本主流程：读取设置 -> 规范化 -> 生成并安装 PAC。"""

    args = parse_args(argv)
    settings_path = Path(args.settings).resolve()
    output_path = Path(args.output).resolve()

    if not settings_path.exists():
        print(f"[ERROR] 找不到设置文件: {settings_path}", file=sys.stderr)
        return 1

    try:
        raw_settings = load_settings(settings_path)
    except (OSError, ValueError) as exc:
        print(f"[ERROR] 设置文件读取失败: {exc}", file=sys.stderr)
        return 1

    validation_errors, validation_warnings = validate_settings(raw_settings)
    if validation_errors:
        _print_items("[ERROR] 设置校验失败：", validation_errors)
        return 1
    all_warnings: list[str] = [f"[validate] {item}" for item in validation_warnings]

    if args.import_lists:
        import_path = Path(args.import_lists).resolve()
        try:
            normalized = import_lists(import_path.read_text(encoding="utf-8"), raw_settings)
        except OSError as exc:
            print(f"[ERROR] 列表文件读取失败: {exc}", file=sys.stderr)
            return 1
    else:
        normalized = normalize_settings(raw_settings)

    # 主机/端口无效时不能落盘；仅生成 PAC 时按默认值回落继续。
    persist = args.write_back or bool(args.import_lists)
    if normalized.errors and persist:
        _print_items("[ERROR] 设置规范化失败，未写回：", normalized.errors)
        return 1
    all_warnings.extend(f"[normalize] {item}" for item in normalized.errors + normalized.warnings)

    if args.strict and all_warnings:
        _print_items("[ERROR] strict 模式命中 warning，已终止生成：", all_warnings)
        return 2

    settings = normalized.settings
    try:
        if persist and fingerprint_settings(settings) != fingerprint_settings(raw_settings):
            save_settings(settings_path, settings)
            print(f"[OK] 已写回规范化设置: {settings_path}")
        if args.export_lists:
            export_path = Path(args.export_lists).resolve()
            export_path.parent.mkdir(parents=True, exist_ok=True)
            export_path.write_text(export_lists(settings), encoding="utf-8")
            print(f"[OK] 已导出列表文件: {export_path}")
    except OSError as exc:
        print(f"[ERROR] 写入失败: {exc}", file=sys.stderr)
        return 1

    config = build_routing_config(settings)
    for host in args.check:
        print(f"{host} -> {decide(host, config)}")

    if not config.enabled:
        try:
            removed = clear_pac_script(output_path)
        except OSError as exc:
            print(f"[ERROR] 清除 PAC 失败: {exc}", file=sys.stderr)
            return 1
        state = "已移除" if removed else "无需移除"
        print(f"[OK] 代理未启用，PAC {state}: {output_path}")
    else:
        try:
            script = build_pac_script(config)
        except PacEmitError as exc:
            # 拒绝安装，已有 PAC 保持生效。
            print(f"[ERROR] PAC 生成失败，未安装: {exc}", file=sys.stderr)
            return 1
        try:
            changed = install_pac_script(output_path, script)
        except OSError as exc:
            print(f"[ERROR] PAC 安装失败，已有 PAC 保持不变: {exc}", file=sys.stderr)
            return 1
        state = "已安装" if changed else "内容未变化"
        print(
            f"[OK] PAC {state}: {output_path} "
            f"(mode={config.mode}, include={len(config.include_rules)}, "
            f"bypass={len(config.bypass_rules)}, bypass_root={len(config.bypass_root_rules)})"
        )

    if all_warnings:
        # warning 输出到 stderr，便于在 CI 中与正常日志分流采集。
        _print_items("[WARN] 需要人工关注的项：", all_warnings)

    return 0
