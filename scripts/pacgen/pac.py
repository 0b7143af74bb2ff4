"""PAC 脚本生成。

生成的脚本自包含：代理地址、模式与三张规则表以字面量嵌入，
判定逻辑是 `routing.decide` 的 ES5 版本，浏览器逐请求执行时无需回调本进程。
"""

from __future__ import annotations

import json
import re

from .constants import (
    COMMON_SECOND_LEVEL,
    DEFAULT_PROXY_HOST,
    MODE_ALL,
    MODE_SELECTED,
    PRIVATE_HOST_PATTERNS,
)
from .hosts import canonicalize, format_proxy_host
from .routing import RoutingConfig
from .settings import coerce_port

# 可打印 ASCII 加制表符与换行；部分 PAC 沙箱会直接拒绝非 ASCII 内容。
_PAC_CHARSET_RE = re.compile(r"[\t\n\r\x20-\x7e]*")

# 与 routing.py 中的判定顺序逐条对应；只依赖 isPlainHostName / shExpMatch 两个沙箱原语。
_PAC_RUNTIME = r"""
function strEndsWith(value, suffix) {
  var pos = value.length - suffix.length;
  return pos >= 0 && value.indexOf(suffix, pos) === pos;
}

function inArray(value, list) {
  for (var i = 0; i < list.length; i++) {
    if (list[i] === value) return true;
  }
  return false;
}

function hostMatches(host, rule) {
  if (!host || !rule) return false;

  // Suffix rule: ".ir" matches "ir" and anything ending with ".ir"
  if (rule.charAt(0) === ".") {
    return host === rule.substring(1) || strEndsWith(host, rule);
  }

  if (host === rule) return true;
  return host.length > rule.length && strEndsWith(host, "." + rule);
}

function isInList(host, list) {
  for (var i = 0; i < list.length; i++) {
    if (hostMatches(host, list[i])) return true;
  }
  return false;
}

function isIpLiteral(host) {
  if (host.indexOf(":") !== -1) return true;
  var parts = host.split(".");
  if (parts.length !== 4) return false;
  for (var i = 0; i < parts.length; i++) {
    var part = parts[i];
    if (part.length < 1 || part.length > 3) return false;
    for (var j = 0; j < part.length; j++) {
      var c = part.charAt(j);
      if (c < "0" || c > "9") return false;
    }
    if (parseInt(part, 10) > 255) return false;
  }
  return true;
}

function registrableDomain(host) {
  if (!host || host.charAt(0) === "." || isIpLiteral(host)) return host;

  var raw = host.split(".");
  var parts = [];
  for (var i = 0; i < raw.length; i++) {
    if (raw[i]) parts.push(raw[i]);
  }
  if (parts.length <= 2) return host;

  var tld = parts[parts.length - 1];
  var sld = parts[parts.length - 2];
  if (tld.length === 2 && inArray(sld, COMMON_SECOND_LEVEL)) {
    return parts.slice(-3).join(".");
  }
  return parts.slice(-2).join(".");
}

function isLocalOrPrivate(host) {
  if (!host || isPlainHostName(host)) return true;
  for (var i = 0; i < PRIVATE_PATTERNS.length; i++) {
    if (shExpMatch(host, PRIVATE_PATTERNS[i])) return true;
  }
  return false;
}

function FindProxyForURL(url, host) {
  host = String(host || "").toLowerCase().replace(/^\s+|\s+$/g, "").replace(/\.$/, "");

  // Always DIRECT for local/private networks
  if (isLocalOrPrivate(host)) return DIRECT;

  // Bypass list always wins, first exact/suffix rules, then their root domains
  if (isInList(host, BYPASS)) return DIRECT;
  if (isInList(registrableDomain(host), BYPASS_ROOT)) return DIRECT;

  // Global mode: proxy everything else
  if (MODE === "all") return PROXY;

  // Selected mode: only proxy included sites
  if (isInList(host, INCLUDE)) return PROXY;

  return DIRECT;
}
"""


class PacEmitError(ValueError):
    """PAC 不满足安装前置条件（例如含非 ASCII 字符），拒绝输出。"""


def _js_literal(value: object) -> str:
    return json.dumps(value, ensure_ascii=True)


def proxy_directive(config: RoutingConfig) -> str:
    """PAC 返回值中的代理段，例如 `SOCKS5 127.0.0.1:10808; DIRECT`。"""

    host = canonicalize(config.endpoint.host) or DEFAULT_PROXY_HOST
    port = coerce_port(config.endpoint.port)
    return f"SOCKS5 {format_proxy_host(host)}:{port}; DIRECT"


def ensure_pac_charset(script: str) -> None:
    if not _PAC_CHARSET_RE.fullmatch(script):
        bad = sorted({ch for ch in script if not _PAC_CHARSET_RE.fullmatch(ch)})
        raise PacEmitError(f"PAC 脚本包含不允许的字符：{', '.join(repr(ch) for ch in bad[:5])}")


def build_pac_script(config: RoutingConfig) -> str:
    """生成 PAC 脚本文本。

    端口非法时回落到 10808，代理主机非法时回落到 127.0.0.1，IPv6 主机自动加方括号。
    结果不满足字符集约束时抛 `PacEmitError`，调用方不应安装任何内容。
    """

    mode = MODE_ALL if config.mode == MODE_ALL else MODE_SELECTED

    lines: list[str] = []
    lines.append("// Generated by pacgen. Do not edit by hand.")
    lines.append(f"var PROXY = {_js_literal(proxy_directive(config))};")
    lines.append('var DIRECT = "DIRECT";')
    lines.append(f"var MODE = {_js_literal(mode)};")
    lines.append(f"var INCLUDE = {_js_literal(config.include_rules.texts)};")
    lines.append(f"var BYPASS = {_js_literal(config.bypass_rules.texts)};")
    lines.append(f"var BYPASS_ROOT = {_js_literal(config.bypass_root_rules.texts)};")
    lines.append(f"var PRIVATE_PATTERNS = {_js_literal(list(PRIVATE_HOST_PATTERNS))};")
    lines.append(f"var COMMON_SECOND_LEVEL = {_js_literal(sorted(COMMON_SECOND_LEVEL))};")
    script = "\n".join(lines) + "\n" + _PAC_RUNTIME

    ensure_pac_charset(script)
    return script
