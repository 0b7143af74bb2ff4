"""路由判定行为测试。"""

from __future__ import annotations

import dataclasses
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPTS_DIR = ROOT / "scripts"
if str(SCRIPTS_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPTS_DIR))

from pacgen.constants import DIRECT, MODE_ALL, MODE_SELECTED, PROXY  # noqa: E402
from pacgen.models import HostToken, ProxyEndpoint, RuleSet, SuffixRule  # noqa: E402
from pacgen.primitives import LocalPrimitives  # noqa: E402
from pacgen.routing import (  # noqa: E402
    RoutingConfig,
    build_routing_config,
    canonical_request_host,
    decide,
    derive_root_rules,
    host_matches,
    is_local_or_private,
)


def make_config(mode: str = MODE_SELECTED, include: list | None = None, bypass: list | None = None) -> RoutingConfig:
    return build_routing_config(
        {
            "enabled": True,
            "proxyHost": "127.0.0.1",
            "proxyPort": 1080,
            "mode": mode,
            "includeSites": include or [],
            "bypassSites": bypass or [],
        }
    )


class DecideTests(unittest.TestCase):
    def test_selected_mode_proxies_included_root_and_subdomains(self) -> None:
        config = make_config(include=["www.example.com"])
        self.assertEqual(config.include_rules.texts, ["example.com"])
        self.assertEqual(decide("example.com", config), PROXY)
        self.assertEqual(decide("api.example.com", config), PROXY)
        self.assertEqual(decide("other.com", config), DIRECT)
        self.assertEqual(decide("notexample.com", config), DIRECT)

    def test_all_mode_with_suffix_bypass(self) -> None:
        config = make_config(mode=MODE_ALL, bypass=[".ir"])
        self.assertEqual(decide("news.ir", config), DIRECT)
        self.assertEqual(decide("ir", config), DIRECT)
        self.assertEqual(decide("google.com", config), PROXY)

    def test_bypass_root_catches_sibling_subdomains(self) -> None:
        config = make_config(mode=MODE_ALL, bypass=["www.example.com"])
        self.assertEqual(config.bypass_rules.texts, ["www.example.com"])
        self.assertEqual(config.bypass_root_rules.texts, ["example.com"])
        self.assertEqual(decide("cdn.example.com", config), DIRECT)
        self.assertEqual(decide("example.com", config), DIRECT)
        self.assertEqual(decide("example.org", config), PROXY)

    def test_bypass_beats_include(self) -> None:
        config = make_config(include=["example.com"], bypass=["example.com"])
        self.assertEqual(decide("example.com", config), DIRECT)
        self.assertEqual(decide("www.example.com", config), DIRECT)

    def test_private_hosts_cannot_be_proxied(self) -> None:
        config = make_config(
            mode=MODE_ALL,
            include=["192.168.1.10", "10.0.0.1", "intranet"],
            bypass=["192.168.1.10", "10.0.0.1", "intranet"],
        )
        self.assertEqual(len(config.include_rules), 3)
        self.assertEqual(len(config.bypass_rules), 3)
        for host in ("192.168.1.10", "10.0.0.1", "127.0.0.1", "localhost", "intranet", "169.254.1.1", "172.20.1.1"):
            with self.subTest(host=host):
                self.assertEqual(decide(host, config), DIRECT)

    def test_private_globs_are_textual(self) -> None:
        config = make_config(mode=MODE_ALL)
        self.assertEqual(decide("172.15.0.1", config), PROXY)
        self.assertEqual(decide("172.32.0.1", config), DIRECT)
        self.assertEqual(decide("8.8.8.8", config), PROXY)

    def test_request_host_normalization(self) -> None:
        config = make_config(include=["example.com"])
        self.assertEqual(decide("  WWW.Example.COM. ", config), PROXY)

    def test_decide_is_total(self) -> None:
        config = make_config(mode=MODE_ALL)
        for host in (None, "", "   ", 123, "???", "a b"):
            with self.subTest(host=host):
                self.assertIn(decide(host, config), (PROXY, DIRECT))
        self.assertEqual(decide(None, config), DIRECT)
        self.assertEqual(decide("", config), DIRECT)

    def test_enabled_does_not_affect_decision(self) -> None:
        config = build_routing_config({"enabled": False, "mode": MODE_ALL})
        self.assertFalse(config.enabled)
        self.assertEqual(decide("example.com", config), PROXY)

    def test_custom_primitives(self) -> None:
        class NothingIsLocal(LocalPrimitives):
            def is_plain_host_name(self, host: str) -> bool:
                return False

            def sh_exp_match(self, value: str, pattern: str) -> bool:
                return False

        config = make_config(mode=MODE_ALL)
        self.assertEqual(decide("intranet", config), DIRECT)
        self.assertEqual(decide("intranet", config, primitives=NothingIsLocal()), PROXY)


class MatchingTests(unittest.TestCase):
    def test_host_matches(self) -> None:
        rule = HostToken("example.com")
        self.assertTrue(host_matches("example.com", rule))
        self.assertTrue(host_matches("a.b.example.com", rule))
        self.assertFalse(host_matches("badexample.com", rule))
        self.assertFalse(host_matches("", rule))

    def test_suffix_rule_matches_body(self) -> None:
        rule = SuffixRule("ir")
        self.assertTrue(host_matches("ir", rule))
        self.assertTrue(host_matches("a.b.ir", rule))
        self.assertFalse(host_matches("pair", rule))

    def test_canonical_request_host(self) -> None:
        self.assertEqual(canonical_request_host(" Example.com. "), "example.com")
        self.assertEqual(canonical_request_host(None), "")
        self.assertEqual(canonical_request_host(42), "")

    def test_is_local_or_private(self) -> None:
        self.assertTrue(is_local_or_private(""))
        self.assertTrue(is_local_or_private("printer"))
        self.assertTrue(is_local_or_private("192.168.0.1"))
        self.assertFalse(is_local_or_private("example.com"))


class RoutingConfigTests(unittest.TestCase):
    def test_root_rules_drop_suffix_rules_and_dedupe(self) -> None:
        bypass = RuleSet((SuffixRule("ir"), HostToken("a.example.com"), HostToken("b.example.com")))
        self.assertEqual(derive_root_rules(bypass).texts, ["example.com"])

    def test_config_is_frozen(self) -> None:
        config = make_config()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            config.mode = MODE_ALL  # type: ignore[misc]

    def test_root_rules_cannot_be_passed_in(self) -> None:
        with self.assertRaises(TypeError):
            RoutingConfig(  # type: ignore[call-arg]
                enabled=True,
                endpoint=ProxyEndpoint("127.0.0.1", 1080),
                mode=MODE_ALL,
                include_rules=RuleSet(),
                bypass_rules=RuleSet(),
                bypass_root_rules=RuleSet(),
            )

    def test_build_coerces_port_and_mode(self) -> None:
        config = build_routing_config({"proxyPort": "99999", "mode": "ALL", "includeSites": None})
        self.assertEqual(config.endpoint.port, 10808)
        self.assertEqual(config.mode, MODE_ALL)
        self.assertEqual(len(config.include_rules), 0)

        config = build_routing_config({"proxyPort": "1080.9", "mode": "weird"})
        self.assertEqual(config.endpoint.port, 1080)
        self.assertEqual(config.mode, MODE_SELECTED)

    def test_build_uses_defaults(self) -> None:
        config = build_routing_config({})
        self.assertEqual(config.endpoint, ProxyEndpoint("127.0.0.1", 10808))
        self.assertFalse(config.enabled)
        self.assertEqual(config.mode, MODE_SELECTED)


if __name__ == "__main__":
    unittest.main()
