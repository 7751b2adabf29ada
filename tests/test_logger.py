"""Tests for the verdict log."""

from __future__ import annotations

import json

from isitsafe.logger import configure_verdict_log, log_result


def _entries(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def test_log_result_writes_one_json_line(verdict_log):
    log_result("3017620422003", "Nutella", ("Milk", "Soy"), False, 3)

    [entry] = _entries(verdict_log)
    assert entry["barcode"] == "3017620422003"
    assert entry["product_name"] == "Nutella"
    assert entry["matched_ingredients"] == ["Milk", "Soy"]
    assert entry["is_safe"] is False
    assert entry["blacklist_size"] == 3
    assert entry["timestamp"].endswith("+00:00")


def test_reconfigure_switches_file(tmp_path, verdict_log):
    log_result("1", "First", (), True, 0)

    other = tmp_path / "nested" / "other.log"
    configure_verdict_log(other)
    log_result("2", "Second", (), True, 0)

    assert [e["barcode"] for e in _entries(verdict_log)] == ["1"]
    assert [e["barcode"] for e in _entries(other)] == ["2"]
