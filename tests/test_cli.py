from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from dvsim.cli.main import main
from dvsim.cli.prompt import prompt_link_costs
from dvsim.cli.render import StepPrinter, format_routes
from dvsim.cli.run_emu import load_effective_config, run_emu
from dvsim.cli.validate import validate_config
from dvsim.core.topology import ConfigError, Topology
from dvsim.core.types import RouteSnapshot, StepReport


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text.strip() + "\n", encoding="utf-8")
    return path


def test_load_effective_config_merges_defaults(tmp_path: Path) -> None:
    _write(
        tmp_path / "configs" / "defaults.yaml",
        """
seed: 1
engine:
  infinity: 16
  static_threshold: 10
""",
    )
    exp = _write(
        tmp_path / "configs" / "exp" / "line.yaml",
        """
name: line
engine:
  static_threshold: 4
topology:
  routers: [A, B]
  links:
    - {u: A, v: B, cost: 1}
""",
    )
    cfg = load_effective_config(exp)
    assert cfg["seed"] == 1
    assert cfg["engine"] == {"infinity": 16, "static_threshold": 4}
    assert cfg["topology"]["routers"] == ["A", "B"]


def test_validate_config_reports_problems() -> None:
    assert validate_config({}) == ["Missing 'topology' config"]
    errors = validate_config({"topology": {}, "engine": {"inbox_capacity": 0, "inbox_order": "random"}})
    assert "engine.inbox_capacity must be a positive integer" in errors
    assert any("inbox_order" in e for e in errors)
    errors = validate_config(
        {"topology": {"routers": ["A"], "links": [{"u": "A", "v": "Q", "cost": 1}]}}
    )
    assert errors == ["Unknown router: Q"]
    assert validate_config({"topology": {"type": "reference", "auto_fill": True}}) == []


def test_cli_validate_command(tmp_path: Path, capsys) -> None:
    good = _write(tmp_path / "good.yaml", "topology: {type: reference, auto_fill: true}")
    bad = _write(tmp_path / "bad.yaml", "topology: {type: reference}")

    assert main(["validate", "--config", str(good)]) == 0
    assert json.loads(capsys.readouterr().out) == {"ok": True}
    assert main(["validate", "--config", str(bad)]) == 1
    assert json.loads(capsys.readouterr().out)["ok"] is False


def test_cli_run_prints_json_result(tmp_path: Path, capsys) -> None:
    cfg = _write(
        tmp_path / "line.yaml",
        f"""
name: line
seed: 3
output_dir: {tmp_path / 'runs'}
topology:
  routers: [A, B, C]
  links:
    - {{u: A, v: B, cost: 1}}
    - {{u: B, v: C, cost: 1}}
""",
    )
    assert main(["run", "--config", str(cfg)]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["route_tables"]["0"]["2"] == {"destination": 2, "next_hop": 1, "cost": 2}


def test_cli_show_prompts_for_costs(tmp_path: Path, capsys, monkeypatch) -> None:
    cfg = _write(
        tmp_path / "line.yaml",
        f"""
name: prompted
seed: 5
output_dir: {tmp_path / 'runs'}
topology:
  adjacency:
    A: [B]
    B: [A, C]
    C: [B]
""",
    )
    monkeypatch.setattr("sys.stdin", io.StringIO("2\n0\n"))
    assert main(["show", "--config", str(cfg), "--prompt-costs"]) == 0
    out = capsys.readouterr().out
    assert "C(A,B)=" in out
    assert "C(A,C)=3 via B" in out
    assert "C(C,A)=2 via B" in out
    assert "Converged at step" in out


def test_prompt_reprompts_on_bad_input_and_auto_fills() -> None:
    topo = Topology.reference()
    stdout = io.StringIO()
    entered = prompt_link_costs(topo, io.StringIO("x\n99\n3\n0\n"), stdout, default_cost=1, infinity=16)
    a, b, c = (topo.id_of(x) for x in "ABC")
    assert entered == [3, 0]
    assert topo.cost(a, b) == 3
    assert topo.cost(a, c) == 1
    assert topo.undefined_links() == []
    assert "not an integer" in stdout.getvalue()
    assert "18 link costs defined" in stdout.getvalue()


def test_prompt_stops_at_end_of_input() -> None:
    topo = Topology.reference()
    entered = prompt_link_costs(topo, io.StringIO("2\n"), io.StringIO())
    assert entered == [2]
    assert len(topo.undefined_links()) == 17


def test_format_routes_marks_unreachable() -> None:
    topo = Topology.from_config({"routers": ["A", "B"], "links": [{"u": "A", "v": "B", "cost": 1}]})
    routes = [
        RouteSnapshot(0, 0, 0, 0),
        RouteSnapshot(0, 1, None, 16),
        RouteSnapshot(1, 0, 0, 1),
        RouteSnapshot(1, 1, 1, 0),
    ]
    assert format_routes(topo, routes, 16) == ["C(A,B)=INF", "", "C(B,A)=1 via A"]


def test_run_emu_rejects_invalid_config(tmp_path: Path) -> None:
    cfg = _write(tmp_path / "bad.yaml", "topology: {routers: [A], links: [{u: A, v: B, cost: 1}]}")
    with pytest.raises(ConfigError, match="Unknown router: B"):
        run_emu(cfg)


def test_load_effective_config_without_defaults_is_experiment_only(tmp_path: Path) -> None:
    cfg = _write(tmp_path / "exp.yaml", "name: solo\nengine: {static_threshold: 3}")
    assert load_effective_config(cfg) == {"name": "solo", "engine": {"static_threshold": 3}}


def test_step_printer_shows_running_totals() -> None:
    topo = Topology.from_config({"routers": ["A", "B"], "links": [{"u": "A", "v": "B", "cost": 1}]})
    out = io.StringIO()
    StepPrinter(topo, 16, out)(
        StepReport(
            step=4,
            step_drops=0,
            total_drops=2,
            step_delta=1,
            total_changes=7,
            sends=(0,),
            routes=(RouteSnapshot(0, 1, 1, 1),),
        )
    )
    assert out.getvalue().startswith("step 4 (drops: 2) (delta: 1) (changes: 7)\n")
    assert "C(A,B)=1 via B" in out.getvalue()
