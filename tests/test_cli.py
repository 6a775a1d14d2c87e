"""
CLI Tests - scripts/rules.py
"""

import importlib.util
import json
import os

import pytest

_SCRIPT = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "scripts", "rules.py")


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("rules_cli", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


ENCOUNTER = {
    "entities": [
        {"id": "p1", "health": 50, "max_health": 50},
        {"id": "p2", "health": 50, "max_health": 50,
         "statuses": [{"kind": "Shield", "potency": 4}]},
    ],
    "card": {
        "id": "strike",
        "effects": [{"kind": "Damage", "amount": 10, "target": "Opponent"}],
    },
    "source": "p1",
    "targets": ["p2"],
}


class TestMath:

    def test_all_scenarios_pass(self, cli, clean_env, capsys):
        assert cli.main(["math"]) == 0
        assert "scenarios passed" in capsys.readouterr().out

    def test_verbose_lists_passes(self, cli, clean_env, capsys):
        cli.main(["math", "-v"])
        assert "[PASS]" in capsys.readouterr().out

    def test_bad_config_exit_code(self, cli, clean_env, capsys):
        clean_env.setenv("RULES_WEAK_MULTIPLIER", "lots")
        assert cli.main(["math"]) == 2


class TestResolve:

    def test_resolves_card(self, cli, clean_env, tmp_path, capsys):
        path = tmp_path / "fight.json"
        path.write_text(json.dumps(ENCOUNTER))
        assert cli.main(["resolve", str(path)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["succeeded"]
        assert output["applied"][0]["amount_applied"] == 6
        assert output["applied"][0]["absorbed"] == 4
        assert output["entities"]["p2"]["health"] == 44

    def test_missing_file(self, cli, clean_env, tmp_path):
        assert cli.main(["resolve", str(tmp_path / "nope.json")]) == 2

    def test_unknown_effect_kind(self, cli, clean_env, tmp_path):
        bad = dict(ENCOUNTER, card={"id": "x", "effects": [{"kind": "Explode"}]})
        path = tmp_path / "bad.json"
        path.write_text(json.dumps(bad))
        assert cli.main(["resolve", str(path)]) == 2

    def test_no_command_prints_help(self, cli, capsys):
        assert cli.main([]) == 0
        assert "usage" in capsys.readouterr().out
