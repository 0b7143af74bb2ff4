"""用户输入列表到规则集合的规范化。"""

from __future__ import annotations

from typing import Iterable

from .hosts import parse_entry
from .models import DedupeResult, Rule, RuleSet
from .registrable import reduce_rule


def dedupe_keep_order(items: Iterable[str]) -> list[str]:
    """按首次出现顺序去重。

    生成 PAC 数据表时使用，保证同一输入总是得到同一输出。
    """

    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if not item or item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result


def dedupe_keep_last(items: Iterable[str]) -> DedupeResult:
    """按最后一次出现的位置去重，并报告发生过重复的值。

    编辑框回写时使用：重复项被移到最后一次出现的位置，
    `duplicates` 按首次出现顺序列出，便于提示用户。
    """

    values = list(items)
    last_index: dict[str, int] = {}
    counts: dict[str, int] = {}
    for idx, item in enumerate(values):
        last_index[item] = idx
        counts[item] = counts.get(item, 0) + 1

    unique = [item for idx, item in enumerate(values) if last_index[item] == idx]
    duplicates = [item for item, count in counts.items() if count > 1]
    return DedupeResult(items=unique, duplicates=duplicates)


def cleanup_lines(text: str) -> str:
    """统一换行、去掉每行首尾空白并删除空行。"""

    lines = str(text or "").replace("\r\n", "\n").split("\n")
    return "\n".join(line.strip() for line in lines if line.strip())


def _normalize_rule(raw: object, allow_suffix_rule: bool, reduce_to_root: bool) -> Rule | None:
    rule = parse_entry(raw, allow_suffix_rule=allow_suffix_rule)
    if rule is None:
        return None
    return reduce_rule(rule) if reduce_to_root else rule


def normalize_entry(raw: object, allow_suffix_rule: bool = False, reduce_to_root: bool = True) -> str:
    """单条输入的规范化文本；被拒绝时返回空字符串。"""

    rule = _normalize_rule(raw, allow_suffix_rule, reduce_to_root)
    return rule.text if rule is not None else ""


def normalize_list(
    raw_entries: Iterable[object] | None,
    allow_suffix_rule: bool = False,
    reduce_to_root: bool = True,
) -> RuleSet:
    """把原始输入列表转换为供路由判定使用的 `RuleSet`。

    每条依次经过主机解析、（可选）根域归约，丢弃无效项后按首次出现去重。
    """

    seen: set[str] = set()
    entries: list[Rule] = []
    for raw in raw_entries or []:
        rule = _normalize_rule(raw, allow_suffix_rule, reduce_to_root)
        if rule is None or rule.text in seen:
            continue
        seen.add(rule.text)
        entries.append(rule)
    return RuleSet(tuple(entries))


def parse_domain_list(
    text: str,
    allow_suffix_rule: bool = False,
    reduce_to_root: bool = True,
) -> DedupeResult:
    """编辑框文本（每行一条）到规范化列表，保留最后一次出现并报告重复。"""

    cleaned = cleanup_lines(text)
    normalized = [
        normalize_entry(line, allow_suffix_rule=allow_suffix_rule, reduce_to_root=reduce_to_root)
        for line in cleaned.split("\n")
    ]
    return dedupe_keep_last(item for item in normalized if item)


def rejected_entries(raw_entries: Iterable[object] | None, allow_suffix_rule: bool = False) -> list[str]:
    """列出无法识别为主机或后缀规则的原始输入，用于告警。"""

    rejected: list[str] = []
    for raw in raw_entries or []:
        text = str(raw).strip() if raw is not None else ""
        if not text:
            continue
        if parse_entry(raw, allow_suffix_rule=allow_suffix_rule) is None:
            rejected.append(text)
    return dedupe_keep_order(rejected)


def describe_duplicates(duplicates: list[str]) -> str:
    """重复项提示文本：最多展示三项，其余以 `(+N more)` 概括。"""

    if not duplicates:
        return ""
    preview = ", ".join(duplicates[:3])
    more = len(duplicates) - 3
    more_text = f" (+{more} more)" if more > 0 else ""
    return f"重复项已去除并保留在最后一次出现的位置（{preview}{more_text}）。"
