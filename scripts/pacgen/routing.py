"""路由判定：给定请求主机与规则表，决定走 SOCKS5 代理还是直连。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .constants import (
    DEFAULT_PROXY_HOST,
    DEFAULT_SETTINGS,
    DIRECT,
    MODE_ALL,
    MODE_SELECTED,
    PRIVATE_HOST_PATTERNS,
    PROXY,
)
from .models import ProxyEndpoint, Rule, RuleSet
from .normalize import normalize_list
from .primitives import LocalPrimitives, PacPrimitives
from .registrable import reduce_rule, registrable_domain
from .settings import coerce_mode, coerce_port

_LOCAL_PRIMITIVES = LocalPrimitives()


def derive_root_rules(bypass_rules: RuleSet) -> RuleSet:
    """由 bypass 规则推导根域 bypass 表：逐条根域归约，丢弃后缀规则，按首次出现去重。"""

    seen: set[str] = set()
    entries: list[Rule] = []
    for rule in bypass_rules:
        reduced = reduce_rule(rule)
        if reduced.is_suffix or reduced.text in seen:
            continue
        seen.add(reduced.text)
        entries.append(reduced)
    return RuleSet(tuple(entries))


@dataclass(frozen=True)
class RoutingConfig:
    """一次配置变更对应的完整路由表。

    构造后不可变；`bypass_root_rules` 只是 `bypass_rules` 的派生缓存，不能单独传入。
    `enabled` 不参与逐请求判定，只决定是否安装 PAC。
    """

    enabled: bool
    endpoint: ProxyEndpoint
    mode: str
    include_rules: RuleSet
    bypass_rules: RuleSet
    bypass_root_rules: RuleSet = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "bypass_root_rules", derive_root_rules(self.bypass_rules))


def build_routing_config(settings: dict) -> RoutingConfig:
    """从设置记录构造 `RoutingConfig`。

    include 归约到根域且不接受后缀规则；bypass 保留精确主机并允许 `.suffix`。
    端口与模式不合法时分别回落到默认端口与 `selected`。
    """

    merged = {**DEFAULT_SETTINGS, **(settings or {})}
    include_sites = merged.get("includeSites")
    bypass_sites = merged.get("bypassSites")
    endpoint = ProxyEndpoint(
        host=str(merged.get("proxyHost") or DEFAULT_PROXY_HOST).strip() or DEFAULT_PROXY_HOST,
        port=coerce_port(merged.get("proxyPort")),
    )
    return RoutingConfig(
        enabled=bool(merged.get("enabled")),
        endpoint=endpoint,
        mode=coerce_mode(merged.get("mode")),
        include_rules=normalize_list(
            include_sites if isinstance(include_sites, list) else [],
            allow_suffix_rule=False,
            reduce_to_root=True,
        ),
        bypass_rules=normalize_list(
            bypass_sites if isinstance(bypass_sites, list) else [],
            allow_suffix_rule=True,
            reduce_to_root=False,
        ),
    )


def canonical_request_host(host: object) -> str:
    """逐请求的轻量规范化：小写、去首尾空白、去一个尾点。"""

    if not isinstance(host, str):
        return ""
    h = host.strip().lower()
    return h[:-1] if h.endswith(".") else h


def host_matches(host: str, rule: Rule) -> bool:
    """判断主机是否命中单条规则。

    后缀规则 `.ir` 命中 `ir` 本身与任何以 `.ir` 结尾的主机；
    主机规则命中完全相同的主机或其严格子域。
    """

    if not host:
        return False
    if rule.is_suffix:
        return host == rule.body or host.endswith(rule.text)
    value = rule.value
    if host == value:
        return True
    return len(host) > len(value) and host.endswith("." + value)


def is_in_list(host: str, rules: Iterable[Rule]) -> bool:
    return any(host_matches(host, rule) for rule in rules)


def is_local_or_private(host: str, primitives: PacPrimitives | None = None) -> bool:
    prims = primitives or _LOCAL_PRIMITIVES
    if not host or prims.is_plain_host_name(host):
        return True
    return any(prims.sh_exp_match(host, pattern) for pattern in PRIVATE_HOST_PATTERNS)


def decide(request_host: object, config: RoutingConfig, primitives: PacPrimitives | None = None) -> str:
    """返回 `PROXY` 或 `DIRECT`。

    固定优先级，先命中者生效：
    1) 本地/内网地址（含空主机、单段主机名）一律直连，用户规则不能覆盖；
    2) 命中 bypass；
    3) 请求主机的根域命中根域 bypass 表；
    4) `all` 模式走代理；
    5) `selected` 模式仅 include 命中时走代理；
    6) 其余直连。
    """

    host = canonical_request_host(request_host)
    if is_local_or_private(host, primitives):
        return DIRECT
    if is_in_list(host, config.bypass_rules):
        return DIRECT
    if is_in_list(registrable_domain(host), config.bypass_root_rules):
        return DIRECT
    if config.mode == MODE_ALL:
        return PROXY
    if config.mode == MODE_SELECTED and is_in_list(host, config.include_rules):
        return PROXY
    return DIRECT
