"""规则规范化与路由判定过程中的中间模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Union

from .constants import HOST_KIND_DOMAIN


@dataclass(frozen=True)
class HostToken:
    """已规范化的主机名：域名、IPv4/IPv6 字面量或 `localhost`。

    `value` 总是小写、无尾点、无方括号；`kind` 在解析时一次性确定，
    后续环节直接读取，不再按字符串前缀重新推断。
    """

    value: str
    kind: str = HOST_KIND_DOMAIN

    is_suffix = False

    @property
    def text(self) -> str:
        return self.value


@dataclass(frozen=True)
class SuffixRule:
    """后缀规则，例如 `.ir`：匹配 `ir` 本身以及任何 `*.ir` 主机。"""

    body: str

    is_suffix = True

    @property
    def text(self) -> str:
        return "." + self.body


Rule = Union[HostToken, SuffixRule]


@dataclass(frozen=True)
class RuleSet:
    """去重后的有序规则集合。

    顺序只影响输出文本，匹配本身是存在性判断。
    """

    entries: tuple[Rule, ...] = ()

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def texts(self) -> list[str]:
        return [entry.text for entry in self.entries]


@dataclass(frozen=True)
class ProxyEndpoint:
    host: str
    port: int


@dataclass
class DedupeResult:
    """保留最后一次出现的去重结果，附带发生过重复的值。"""

    items: list[str]
    duplicates: list[str] = field(default_factory=list)


@dataclass
class NormalizedSettings:
    """一次“编辑/导入 -> 保存”循环后的设置记录与报告。

    `settings` 与输入同形（字符串数组已规范化）；`errors` 非空时不应落盘。
    """

    settings: dict
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    include_duplicates: list[str] = field(default_factory=list)
    bypass_duplicates: list[str] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)
