#!/usr/bin/env python3
"""根据设置文件中的 include/bypass 列表生成并安装 SOCKS5 PAC 脚本。"""

from __future__ import annotations

import sys
from pathlib import Path

SCRIPTS_DIR = Path(__file__).resolve().parent
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

from pacgen.app import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
