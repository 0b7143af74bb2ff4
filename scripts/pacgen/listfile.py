"""include/bypass 列表的导入导出文本格式。

格式固定为两段，段头大小写不敏感，之后每行一个主机或规则：

    Include List:
    example.com

    Bypass List:
    .ir

两个段头都不存在时，整份文件视为 include 列表。
"""

from __future__ import annotations

import re

from .constants import BYPASS_LIST_HEADER, INCLUDE_LIST_HEADER
from .models import NormalizedSettings
from .normalize import cleanup_lines
from .settings import normalize_settings

_INCLUDE_HEADER_RE = re.compile(r"^include\s*list\s*:", re.IGNORECASE)
_BYPASS_HEADER_RE = re.compile(r"^bypass\s*list\s*:", re.IGNORECASE)


def build_lists_file_text(include_text: str, bypass_text: str) -> str:
    include_clean = cleanup_lines(include_text)
    bypass_clean = cleanup_lines(bypass_text)
    return "\n".join(
        [
            INCLUDE_LIST_HEADER,
            include_clean,
            "",
            BYPASS_LIST_HEADER,
            bypass_clean,
            "",
        ]
    )


def parse_lists_file_text(file_text: str) -> tuple[str, str]:
    """解析导入文件，返回 `(include_text, bypass_text)`。

    段头所在行的其余内容会被忽略；段头之前的行不归属任何列表。
    """

    text = str(file_text or "").replace("\r\n", "\n")
    section = ""
    has_header = False
    include: list[str] = []
    bypass: list[str] = []

    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        if _INCLUDE_HEADER_RE.match(line):
            section = "include"
            has_header = True
            continue
        if _BYPASS_HEADER_RE.match(line):
            section = "bypass"
            has_header = True
            continue
        if section == "include":
            include.append(raw)
        elif section == "bypass":
            bypass.append(raw)

    if not has_header:
        return cleanup_lines(text), ""
    return cleanup_lines("\n".join(include)), cleanup_lines("\n".join(bypass))


def export_lists(settings: dict) -> str:
    include_sites = settings.get("includeSites") or []
    bypass_sites = settings.get("bypassSites") or []
    return build_lists_file_text(
        "\n".join(str(item) for item in include_sites),
        "\n".join(str(item) for item in bypass_sites),
    )


def import_lists(file_text: str, settings: dict) -> NormalizedSettings:
    """用导入文件替换设置中的两个列表，并执行一次保存前的规范化。

    返回 `NormalizedSettings`，其余字段沿用传入的设置。
    """

    include_text, bypass_text = parse_lists_file_text(file_text)
    updated = dict(settings)
    updated["includeSites"] = include_text.split("\n") if include_text else []
    updated["bypassSites"] = bypass_text.split("\n") if bypass_text else []
    return normalize_settings(updated)
