"""PAC 生成器使用的静态常量。"""

from __future__ import annotations

DEFAULT_PROXY_HOST = "127.0.0.1"
DEFAULT_PROXY_PORT = 10808
MAX_PORT = 65535

MODE_SELECTED = "selected"
MODE_ALL = "all"

PROXY = "PROXY"
DIRECT = "DIRECT"

# 设置记录的默认值：缺失字段按这里回落，与存储层 `get(defaults)` 的语义一致。
DEFAULT_SETTINGS = {
    "enabled": False,
    "proxyHost": DEFAULT_PROXY_HOST,
    "proxyPort": DEFAULT_PROXY_PORT,
    "mode": MODE_SELECTED,
    "includeSites": [],
    "bypassSites": [],
}

HOST_KIND_DOMAIN = "domain"
HOST_KIND_IPV4 = "ipv4"
HOST_KIND_IPV6 = "ipv6"
HOST_KIND_LOCALHOST = "localhost"

# 常见 ccTLD 二级后缀：`bbc.co.uk` 这类域名需要保留最后三段。
# 这是近似启发式，不是完整 PSL；集合外的多段公共后缀会被截成两段。
COMMON_SECOND_LEVEL = frozenset({"co", "com", "net", "org", "gov", "edu", "ac"})

# 本地/内网短路判定使用的 shExpMatch 模式。
# 保持原有覆盖范围（含 `172.2?.*` / `172.3?.*` 的宽匹配），不在这里静默“修正”。
PRIVATE_HOST_PATTERNS = (
    "localhost",
    "127.*",
    "10.*",
    "192.168.*",
    "169.254.*",
    "172.16.*",
    "172.17.*",
    "172.18.*",
    "172.19.*",
    "172.2?.*",
    "172.3?.*",
)

INCLUDE_LIST_HEADER = "Include List:"
BYPASS_LIST_HEADER = "Bypass List:"

DEFAULT_SETTINGS_FILE = "settings.json"
DEFAULT_PAC_FILE = "proxy.pac"
