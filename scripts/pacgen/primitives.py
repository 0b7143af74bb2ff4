"""PAC 沙箱提供的主机判定原语。

PAC 运行环境只向脚本暴露少量内置函数；路由算法只依赖其中两个，
本地判定与生成的脚本通过同一接口描述，避免两边各写一份规则。
"""

from __future__ import annotations

import fnmatch
from abc import ABC, abstractmethod


class PacPrimitives(ABC):
    @abstractmethod
    def is_plain_host_name(self, host: str) -> bool:
        ...

    @abstractmethod
    def sh_exp_match(self, value: str, pattern: str) -> bool:
        ...


class LocalPrimitives(PacPrimitives):
    """在本进程内复现 PAC 原语语义。"""

    def is_plain_host_name(self, host: str) -> bool:
        return "." not in host

    def sh_exp_match(self, value: str, pattern: str) -> bool:
        # shExpMatch 是 shell 风格通配：`*` 任意串、`?` 单字符，大小写敏感。
        return fnmatch.fnmatchcase(value, pattern)
