"""列表文件导入导出测试。"""

from __future__ import annotations

import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPTS_DIR = ROOT / "scripts"
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

from pacgen.listfile import (  # noqa: E402
    build_lists_file_text,
    export_lists,
    import_lists,
    parse_lists_file_text,
)


class BuildListsFileTests(unittest.TestCase):
    def test_exact_layout(self) -> None:
        text = build_lists_file_text("a.com\n\n  b.com  ", ".ir")
        self.assertEqual(text, "Include List:\na.com\nb.com\n\nBypass List:\n.ir\n")

    def test_empty_lists(self) -> None:
        self.assertEqual(build_lists_file_text("", ""), "Include List:\n\n\nBypass List:\n\n")


class ParseListsFileTests(unittest.TestCase):
    def test_headers_are_case_insensitive(self) -> None:
        text = "include list:\r\na.com\r\n\r\nBYPASS LIST:\r\n.ir\r\nb.com\r\n"
        self.assertEqual(parse_lists_file_text(text), ("a.com", ".ir\nb.com"))

    def test_lines_before_first_header_are_ignored(self) -> None:
        text = "# comment\nInclude List:\na.com\n"
        self.assertEqual(parse_lists_file_text(text), ("a.com", ""))

    def test_no_headers_means_include_only(self) -> None:
        self.assertEqual(parse_lists_file_text("a.com\n b.com \n"), ("a.com\nb.com", ""))

    def test_headers_with_empty_sections(self) -> None:
        self.assertEqual(parse_lists_file_text("Include List:\n\nBypass List:\n"), ("", ""))

    def test_empty_file(self) -> None:
        self.assertEqual(parse_lists_file_text(""), ("", ""))


class ImportExportTests(unittest.TestCase):
    def test_import_normalizes_and_keeps_other_fields(self) -> None:
        settings = {"enabled": True, "proxyHost": "127.0.0.1", "proxyPort": 1080, "mode": "all"}
        result = import_lists("Include List:\nHTTPS://A.com/x\na.com\nb.com\n\nBypass List:\n*.ir\nbad host\n", settings)
        self.assertEqual(result.errors, [])
        self.assertEqual(result.settings["includeSites"], ["a.com", "b.com"])
        self.assertEqual(result.settings["bypassSites"], [".ir"])
        self.assertEqual(result.settings["mode"], "all")
        self.assertEqual(result.settings["proxyPort"], 1080)
        self.assertEqual(result.include_duplicates, ["a.com"])
        self.assertEqual(result.rejected, ["bad host"])

    def test_export_then_import_preserves_lists(self) -> None:
        settings = {"includeSites": ["a.com", "b.org"], "bypassSites": [".ir", "www.c.net"]}
        result = import_lists(export_lists(settings), {})
        self.assertEqual(set(result.settings["includeSites"]), {"a.com", "b.org"})
        self.assertEqual(set(result.settings["bypassSites"]), {".ir", "www.c.net"})


if __name__ == "__main__":
    unittest.main()
