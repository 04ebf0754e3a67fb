"""
Tests for scripts/supply_watch.py - operator CLI.
"""
from __future__ import annotations

import json
from unittest.mock import patch

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

import pytest
import yaml

from monitor.sample import SupplySample
from scripts.supply_watch import EXIT_ERROR, EXIT_OK, EXIT_TRIGGERED, main


@pytest.fixture
def config_path(tmp_path, owner, token):
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.safe_dump({
        "monitor": {"owner": owner, "target_token": token, "max_allowed_increase": 100},
        "rpc": {"url": "http://127.0.0.1:8545"},
    }), encoding="utf-8")
    return path


def run(config_path, tmp_path, *argv):
    return main(["--config", str(config_path), "--dotenv", str(tmp_path / ".env"), *argv])


def last_json(text: str):
    """Parse the JSON document at the end of captured stdout."""
    start = text.index("{")
    return json.loads(text[start:])


class TestStatus:
    def test_active(self, config_path, tmp_path, capsys, token):
        assert run(config_path, tmp_path, "status") == EXIT_OK
        out = last_json(capsys.readouterr().out)
        assert out["status"] == "ACTIVE"
        assert out["target_token"] == token
        assert out["max_allowed_increase"] == "100"

    def test_missing_owner_is_error(self, tmp_path, capsys):
        path = tmp_path / "empty.yaml"
        path.write_text("{}", encoding="utf-8")
        assert run(path, tmp_path, "status") == EXIT_ERROR
        assert "CONFIG_MISSING" in capsys.readouterr().err


class TestEvaluate:
    def test_triggered(self, config_path, tmp_path, capsys, token):
        newest = SupplySample(token, 1200, 100).hex()
        oldest = SupplySample(token, 1000, 100).hex()

        code = run(config_path, tmp_path, "evaluate", newest, oldest, "--sink", "memory")

        assert code == EXIT_OK
        out = last_json(capsys.readouterr().out)
        assert out["triggered"] is True
        assert out["alert"]["old_supply"] == "1000"
        assert out["alert"]["new_supply"] == "1200"

    def test_fail_on_trigger(self, config_path, tmp_path, token):
        samples = [SupplySample(token, 5000, 1).hex(), SupplySample(token, 0, 1).hex()]
        code = run(config_path, tmp_path, "evaluate", *samples, "--sink", "memory", "--fail-on-trigger")
        assert code == EXIT_TRIGGERED

    def test_not_triggered(self, config_path, tmp_path, capsys, token):
        samples = [SupplySample(token, 1050, 100).hex(), SupplySample(token, 1000, 100).hex()]
        assert run(config_path, tmp_path, "evaluate", *samples, "--fail-on-trigger") == EXIT_OK
        out = last_json(capsys.readouterr().out)
        assert out == {"triggered": False, "payload": None}

    def test_malformed_sample(self, config_path, tmp_path, capsys, token):
        samples = ["0xdeadbeef", SupplySample(token, 1000, 100).hex()]
        assert run(config_path, tmp_path, "evaluate", *samples) == EXIT_ERROR
        assert "MALFORMED_INPUT" in capsys.readouterr().err


class TestSample:
    def test_prints_encoded_sample(self, config_path, tmp_path, capsys, token):
        with patch("scripts.supply_watch.Web3SupplyReader") as reader_cls:
            reader_cls.return_value.total_supply.return_value = 777
            assert run(config_path, tmp_path, "sample") == EXIT_OK

        reader_cls.assert_called_once_with(rpc_url="http://127.0.0.1:8545", timeout_seconds=15)
        printed = capsys.readouterr().out.strip().splitlines()[-1]
        assert printed == SupplySample(token, 777, 100).hex()

    def test_json_output(self, config_path, tmp_path, capsys, token):
        with patch("scripts.supply_watch.Web3SupplyReader") as reader_cls:
            reader_cls.return_value.total_supply.return_value = 5
            assert run(config_path, tmp_path, "sample", "--json") == EXIT_OK
        out = last_json(capsys.readouterr().out)
        assert out["observed_supply"] == "5"
        assert out["threshold"] == "100"
        assert out["token"] == token

    def test_read_failure_is_error(self, config_path, tmp_path, capsys):
        with patch("scripts.supply_watch.Web3SupplyReader") as reader_cls:
            reader_cls.return_value.total_supply.side_effect = ConnectionError("down")
            assert run(config_path, tmp_path, "sample") == EXIT_ERROR
        assert "READ_FAILURE" in capsys.readouterr().err
