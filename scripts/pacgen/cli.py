"""命令行参数解析。"""

from __future__ import annotations

import argparse

from .constants import DEFAULT_PAC_FILE, DEFAULT_SETTINGS_FILE


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """解析命令行参数。

    默认值覆盖常见用法：在设置文件所在目录直接执行即可生成 `proxy.pac`。
    """

    parser = argparse.ArgumentParser(description="根据 include/bypass 列表生成 SOCKS5 PAC 脚本")
    parser.add_argument(
        "--settings",
        default=DEFAULT_SETTINGS_FILE,
        help=f"设置文件路径（默认：{DEFAULT_SETTINGS_FILE}）",
    )
    parser.add_argument(
        "--output",
        default=DEFAULT_PAC_FILE,
        help=f"PAC 输出路径（默认：{DEFAULT_PAC_FILE}）；代理关闭时该文件会被移除",
    )
    parser.add_argument(
        "--import-lists",
        default="",
        help="从两段式列表文件导入 include/bypass 列表（导入后写回设置文件）",
    )
    parser.add_argument(
        "--export-lists",
        default="",
        help="把规范化后的 include/bypass 列表导出为两段式列表文件",
    )
    parser.add_argument(
        "--write-back",
        action="store_true",
        help="把规范化后的设置写回设置文件（内容未变化时跳过）",
    )
    parser.add_argument(
        "--check",
        action="append",
        default=[],
        metavar="HOST",
        help="输出指定主机的判定结果（PROXY/DIRECT），可重复",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="严格模式：出现任何 warning 即返回非 0",
    )
    return parser.parse_args(argv)
