"""把 PAC 交给外部网络层：以文件形式安装或清除。"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path


def install_pac_script(path: Path, script: str) -> bool:
    """原子写入 PAC 文件，返回内容是否发生变化。

    先写同目录临时文件再 `os.replace`，读取方任何时刻看到的都是完整的旧脚本或新脚本；
    写入失败时旧文件保持不变，异常交给调用方报告。
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and path.read_text(encoding="ascii", errors="replace") == script:
        return False

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="ascii", newline="\n") as fp:
            fp.write(script)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    return True


def clear_pac_script(path: Path) -> bool:
    """代理关闭时移除已安装的 PAC，返回是否确实删除了文件。"""

    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
