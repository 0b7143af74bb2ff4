"""主机名解析、清洗与校验。"""

from __future__ import annotations

import ipaddress
import re
from urllib.parse import urlsplit

import idna

from .constants import HOST_KIND_DOMAIN, HOST_KIND_IPV4, HOST_KIND_IPV6, HOST_KIND_LOCALHOST
from .models import HostToken, Rule, SuffixRule

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+\-.]*://")
_IPV4_RE = re.compile(r"^[0-9]{1,3}(?:\.[0-9]{1,3}){3}$")
_IPV6_CHARS_RE = re.compile(r"^[0-9a-f:.]+$")
_LABEL_RE = re.compile(r"^[a-z0-9-]+$")
_NON_ASCII_RE = re.compile(r"[^\x00-\x7f]")


def _strip_trailing_dot(value: str) -> str:
    return value[:-1] if value.endswith(".") else value


def _strip_quotes(value: str) -> str:
    return re.sub(r"^[\"']|[\"']$", "", value).strip()


def is_valid_ipv4(host: str) -> bool:
    if not _IPV4_RE.match(host or ""):
        return False
    return all(0 <= int(part) <= 255 for part in host.split("."))


def is_valid_ipv6(host: str) -> bool:
    h = (host or "").strip().lower()
    if not h or ":" not in h or not _IPV6_CHARS_RE.match(h):
        return False
    try:
        ipaddress.IPv6Address(h)
    except ValueError:
        return False
    return True


def is_valid_domain_like(host: str) -> bool:
    """域名形态校验：总长 ≤253，每段 1-63 个 `[a-z0-9-]`，段首尾不能是连字符。"""

    h = _strip_trailing_dot((host or "").strip().lower())
    if not h or len(h) > 253:
        return False
    for label in h.split("."):
        if not label or len(label) > 63:
            return False
        if not _LABEL_RE.match(label):
            return False
        if label.startswith("-") or label.endswith("-"):
            return False
    return True


def is_valid_suffix_rule(rule: str) -> bool:
    """后缀规则校验：`.` 之后必须是合法域名且至少含一个字母，排除 `.10` 这类数字后缀。"""

    r = _strip_trailing_dot((rule or "").strip().lower())
    if not r.startswith("."):
        return False
    body = r[1:]
    return bool(body) and re.search(r"[a-z]", body) is not None and is_valid_domain_like(body)


def is_valid_host_token(host: str) -> bool:
    h = _strip_trailing_dot((host or "").strip().lower())
    if not h:
        return False
    if h == "localhost":
        return True
    if is_valid_ipv4(h):
        return True
    if h.startswith("[") and h.endswith("]"):
        return is_valid_ipv6(h[1:-1])
    if ":" in h:
        return is_valid_ipv6(h)
    return is_valid_domain_like(h)


def is_ip_literal(host: str) -> bool:
    h = (host or "").strip()
    if not h:
        return False
    if h.startswith("[") and h.endswith("]"):
        return is_valid_ipv6(h[1:-1])
    return is_valid_ipv4(h) or is_valid_ipv6(h)


def strip_trailing_port(value: str) -> str:
    """去掉末尾 `:port`。

    只有冒号不超过一个（或 `[v6]:port` 形式）时才处理，否则会把 IPv6 字面量截坏。
    """

    s = value or ""
    if not s:
        return s
    if s.startswith("["):
        return re.sub(r"\]:\d+$", "]", s)
    if s.count(":") <= 1:
        return re.sub(r":\d+$", "", s)
    return s


def classify_host(host: str) -> HostToken | None:
    """把已校验的主机字符串包装成 `HostToken`；不合法时返回 None。"""

    h = _strip_trailing_dot((host or "").strip().lower())
    if not is_valid_host_token(h):
        return None
    if h.startswith("[") and h.endswith("]"):
        h = h[1:-1]
    if h == "localhost":
        return HostToken(h, HOST_KIND_LOCALHOST)
    if is_valid_ipv4(h):
        return HostToken(h, HOST_KIND_IPV4)
    if ":" in h:
        return HostToken(ipaddress.IPv6Address(h).compressed, HOST_KIND_IPV6)
    return HostToken(h, HOST_KIND_DOMAIN)


def _parse_hostname(candidate: str) -> str:
    """按 URL 解析出主机名，必要时转为 punycode。

    端口非法、主机缺失或 IDNA 编码失败都视为解析失败（抛 ValueError），交给调用方走兜底清洗。
    """

    parts = urlsplit(candidate)
    hostname = parts.hostname
    # 访问 port 会触发端口校验，`2001:db8::1` 这类裸 IPv6 会在这里失败。
    _ = parts.port
    if not hostname:
        raise ValueError(f"URL 中没有主机名：{candidate}")
    if not hostname.isascii():
        try:
            hostname = idna.encode(hostname, uts46=True).decode("ascii")
        except (idna.IDNAError, UnicodeError) as exc:
            raise ValueError(f"无法转换为 punycode：{hostname}") from exc
    return hostname


def _fallback_host(value: str) -> HostToken | None:
    s = value.lower()
    s = re.sub(r"^https?://", "", s)
    s = re.sub(r"/.*$", "", s, flags=re.DOTALL)
    s = strip_trailing_port(s)
    s = _strip_trailing_dot(s).strip()
    s = _NON_ASCII_RE.sub("", s)
    if not s:
        return None
    return classify_host(s)


def _parse_suffix_rule(value: str) -> SuffixRule | None:
    suffix = _strip_trailing_dot(_NON_ASCII_RE.sub("", value.lower()))
    if not is_valid_suffix_rule(suffix):
        return None
    return SuffixRule(suffix[1:])


def parse_entry(raw: object, allow_suffix_rule: bool = False) -> Rule | None:
    """把用户输入或观测到的主机字符串解析为 `HostToken` / `SuffixRule`。

    支持 URL、裸域名、IPv4/IPv6（含方括号与端口）、国际化域名、`*.` 通配与 `.suffix` 规则。
    任何无法识别的输入都返回 None，不抛异常，由调用方过滤。
    """

    if raw is None:
        return None
    s = _strip_quotes(str(raw).strip())
    if not s:
        return None

    # `*.ir` 视为后缀规则 `.ir`；`*.example.com` 视为域名 `example.com`，让根域与子域都能命中。
    if s.startswith("*."):
        rest = s[2:].strip()
        if allow_suffix_rule and rest and "." not in rest:
            s = "." + rest
        else:
            s = rest
        if not s:
            return None

    if allow_suffix_rule and s.startswith("."):
        return _parse_suffix_rule(s)

    candidate = s if _SCHEME_RE.match(s) else f"https://{s}"
    try:
        hostname = _parse_hostname(candidate)
    except ValueError:
        return _fallback_host(s)
    return classify_host(hostname)


def canonicalize(raw: object, allow_suffix_rule: bool = False) -> str:
    """`parse_entry` 的字符串形式；被拒绝的输入返回空字符串。"""

    rule = parse_entry(raw, allow_suffix_rule=allow_suffix_rule)
    return rule.text if rule is not None else ""


def format_proxy_host(host: str) -> str:
    """PAC 中的代理主机：IPv6 字面量需要方括号。"""

    h = (host or "").strip()
    if not h:
        return h
    if h.startswith("[") and h.endswith("]"):
        return h
    if is_valid_ipv6(h):
        return f"[{h}]"
    return h
