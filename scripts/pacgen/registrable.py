"""把主机名归约为可注册根域（eTLD+1 的轻量近似）。

规则：
1) 大多数域名保留最后两段：`news.bbc.com` -> `bbc.com`；
2) 两字母 ccTLD 且倒数第二段属于常见二级后缀时保留三段：`www.bbc.co.uk` -> `bbc.co.uk`。

这不是完整的 Public Suffix List：`a.b.io` -> `b.io` 正确，但集合外的多段公共后缀
会被截成两段（`shop.example.ne.jp` -> `ne.jp`），属于已知近似。
"""

from __future__ import annotations

from .constants import COMMON_SECOND_LEVEL, HOST_KIND_DOMAIN
from .hosts import is_ip_literal
from .models import HostToken, Rule


def registrable_domain(host: str) -> str:
    h = (host or "").lower()
    if h.endswith("."):
        h = h[:-1]
    if not h:
        return h
    # 后缀规则与 IP 字面量原样返回。
    if h.startswith("."):
        return h
    if is_ip_literal(h):
        return h

    parts = [part for part in h.split(".") if part]
    if len(parts) <= 2:
        return h

    tld = parts[-1]
    sld = parts[-2]
    if len(tld) == 2 and sld in COMMON_SECOND_LEVEL:
        return ".".join(parts[-3:])
    return ".".join(parts[-2:])


def reduce_rule(rule: Rule) -> Rule:
    """对带标签的规则做根域归约；只有域名类 `HostToken` 会变化。"""

    if rule.is_suffix or rule.kind != HOST_KIND_DOMAIN:
        return rule
    root = registrable_domain(rule.value)
    if root == rule.value:
        return rule
    return HostToken(root, rule.kind)
