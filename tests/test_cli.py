"""Tests for the OpenUda CLI."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import yaml

from openuda.cli import build_parser, main
from openuda.core.errors import SolverLoadFailed
from openuda.nec.session import SolverSession


class CannedHandle:
    def __init__(self, report: str) -> None:
        self.report = report

    async def run(self, input_path: Path, output_path: Path) -> int:
        output_path.write_text(self.report)
        return 0


class CannedBackend:
    name = "canned"

    def __init__(self, report: str) -> None:
        self.report = report

    async def load(self) -> CannedHandle:
        return CannedHandle(self.report)

    def capabilities(self) -> dict[str, Any]:
        return {"solver": "canned"}


class NoSolverBackend:
    name = "none"

    async def load(self) -> CannedHandle:
        raise SolverLoadFailed("nec2c not found")

    def capabilities(self) -> dict[str, Any]:
        return {}


@pytest.fixture
def canned_session(monkeypatch, tmp_path, report_factory, azimuth_factory) -> SolverSession:
    report = report_factory(
        impedance=[(2, 11, 35.0, -12.0), (1, 11, 35.0, -12.0)],
        horizontal=azimuth_factory(7.0, -5.0, side_db=-8.0),
        vertical=[(float(theta), 0.0, 2.0) for theta in range(181)],
        efficiency=99.5,
    )
    session = SolverSession(CannedBackend(report), work_dir=tmp_path / "solver")
    monkeypatch.setattr("openuda.nec.session._session", session)
    return session


def _only_run(workspace: Path) -> Path:
    runs = list((workspace / "runs").iterdir())
    assert len(runs) == 1
    return runs[0]


class TestBuildParser:
    def test_subcommands_present(self):
        parser = build_parser()
        for cmd in ["init", "presets", "encode", "simulate", "optimize", "report", "selftest"]:
            with pytest.raises(SystemExit) as exc_info:
                parser.parse_args([cmd, "--help"])
            assert exc_info.value.code == 0

    def test_version_flag(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0

    def test_no_command_prints_help(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1


class TestCmdInit:
    def test_creates_scaffold(self, tmp_path):
        project_dir = tmp_path / "test_project"
        main(["init", "--name", "test_project", "--dir", str(project_dir), "--objective", "balanced"])

        assert (project_dir / "openuda.yaml").exists()
        assert (project_dir / "workspace" / "runs").exists()
        assert (project_dir / "workspace" / "logs").exists()

        config = yaml.safe_load((project_dir / "openuda.yaml").read_text())
        assert config["project"]["name"] == "test_project"
        assert config["preset"] == "2m-amateur-5el"
        assert config["optimizer"]["objective"] == "balanced"

    def test_no_overwrite(self, tmp_path):
        project_dir = tmp_path / "existing"
        project_dir.mkdir()
        (project_dir / "openuda.yaml").write_text("existing: true")

        main(["init", "--name", "test", "--dir", str(project_dir)])

        content = (project_dir / "openuda.yaml").read_text()
        assert "existing: true" in content

    def test_unknown_preset_fails(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["init", "--dir", str(tmp_path / "p"), "--preset", "nope"])
        assert exc_info.value.code == 1


class TestCmdPresets:
    def test_lists_all(self, capsys):
        main(["presets"])
        out = capsys.readouterr().out
        assert "fm-broadcast-3el" in out
        assert "wifi-2.4ghz-11el" in out

    def test_filter_by_category(self, capsys):
        main(["presets", "--category", "beginner"])
        out = capsys.readouterr().out
        assert "fm-broadcast-3el" in out
        assert "2m-amateur-5el" not in out

    def test_show_one(self, capsys):
        main(["presets", "--id", "70cm-amateur-7el"])
        out = capsys.readouterr().out
        assert out.count("director") == 5


class TestCmdEncode:
    def test_encode_preset_to_stdout(self, capsys, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        main(["encode", "--preset", "fm-broadcast-3el"])
        out = capsys.readouterr().out
        assert out.startswith("CM ")
        assert "FR 0 1 0 0 98 0" in out
        assert out.rstrip().endswith("EN")

    def test_encode_config_to_file(self, sample_config_yaml, tmp_path):
        out_path = tmp_path / "yagi.nec"
        main(["encode", "--config", str(sample_config_yaml), "--output", str(out_path)])
        deck = out_path.read_text()
        assert deck.count("\nGW ") == 3
        assert "EX 0 2 11 0 1.0 0.0" in deck

    def test_missing_config_fails(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main(["encode", "--config", str(tmp_path / "missing.yaml")])
        assert exc_info.value.code == 1


class TestCmdSimulate:
    def test_writes_run_bundle(self, sample_config_yaml, sample_config_dict, canned_session, capsys):
        main(["simulate", "--config", str(sample_config_yaml)])

        run = _only_run(Path(sample_config_dict["project"]["workspace"]))
        manifest = json.loads((run / "manifest.json").read_text())
        assert manifest["status"] == "completed"
        assert "artifacts/designs/initial.yaml" in manifest["artifacts"]
        assert "artifacts/results/simulation.json" in manifest["artifacts"]

        result = json.loads((run / "artifacts" / "results" / "simulation.json").read_text())
        assert result["gain_dbi"] == pytest.approx(7.0)
        assert result["front_to_back_db"] == pytest.approx(12.0)
        assert "Gain: 7.00 dBi" in capsys.readouterr().out

    def test_plots_when_enabled(self, tmp_path, sample_config_dict, canned_session):
        sample_config_dict["outputs"]["plots"] = True
        config_path = tmp_path / "plots.yaml"
        config_path.write_text(yaml.dump(sample_config_dict))

        main(["simulate", "--config", str(config_path)])

        run = _only_run(Path(sample_config_dict["project"]["workspace"]))
        assert (run / "artifacts" / "plots" / "patterns.png").exists()

    def test_solver_missing_marks_run_failed(
        self, sample_config_yaml, sample_config_dict, monkeypatch, tmp_path
    ):
        monkeypatch.setattr(
            "openuda.nec.session._session", SolverSession(NoSolverBackend(), work_dir=tmp_path)
        )
        with pytest.raises(SystemExit) as exc_info:
            main(["simulate", "--config", str(sample_config_yaml)])
        assert exc_info.value.code == 1

        run = _only_run(Path(sample_config_dict["project"]["workspace"]))
        manifest = json.loads((run / "manifest.json").read_text())
        assert manifest["status"] == "failed"


class TestCmdOptimize:
    def test_writes_best_design_and_history(self, sample_config_yaml, sample_config_dict, canned_session):
        main([
            "optimize", "--config", str(sample_config_yaml),
            "--generations", "2", "--population", "4", "--seed", "3",
        ])

        run = _only_run(Path(sample_config_dict["project"]["workspace"]))
        assert (run / "artifacts" / "designs" / "best.yaml").exists()
        history = json.loads((run / "artifacts" / "results" / "history.json").read_text())
        assert [h["generation"] for h in history] == [1, 2]

        manifest = json.loads((run / "manifest.json").read_text())
        assert manifest["status"] == "completed"
        assert manifest["objective"] == "balanced"

    def test_stop_file(self, sample_config_yaml, sample_config_dict, canned_session, tmp_path):
        stop = tmp_path / "STOP"
        stop.write_text("")
        main([
            "optimize", "--config", str(sample_config_yaml),
            "--generations", "5", "--population", "3", "--stop-file", str(stop),
        ])
        run = _only_run(Path(sample_config_dict["project"]["workspace"]))
        history = json.loads((run / "artifacts" / "results" / "history.json").read_text())
        assert len(history) == 1


class TestCmdReport:
    def test_report_after_simulate(self, sample_config_yaml, sample_config_dict, canned_session):
        main(["simulate", "--config", str(sample_config_yaml)])
        run = _only_run(Path(sample_config_dict["project"]["workspace"]))

        main(["report", run.name, "--config", str(sample_config_yaml)])

        report = (run / "report.md").read_text()
        assert run.name in report
        assert "7.00 dBi" in report

    def test_unknown_run(self, sample_config_yaml, capsys):
        main(["report", "nope", "--config", str(sample_config_yaml)])
        assert "not found" in capsys.readouterr().out


class TestCmdSelftest:
    def test_passes(self, canned_session, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)
        main(["selftest"])
        assert "OK" in capsys.readouterr().out

    def test_fails_with_exit_2(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            "openuda.nec.session._session", SolverSession(NoSolverBackend(), work_dir=tmp_path)
        )
        with pytest.raises(SystemExit) as exc_info:
            main(["selftest"])
        assert exc_info.value.code == 2


class TestCmdMcpServe:
    def test_uses_project_solver(self, sample_config_yaml, monkeypatch, capsys):
        from openuda.mcp import server

        transports: list[str] = []
        monkeypatch.setattr(server, "run_server", lambda transport: transports.append(transport))
        try:
            main(["mcp", "serve", "--config", str(sample_config_yaml), "--transport", "http"])
        finally:
            server.create_server()

        out = capsys.readouterr().out
        assert "Solver: nec2c (nec2c)" in out
        assert transports == ["streamable-http"]

    def test_without_config(self, tmp_path, monkeypatch, capsys):
        from openuda.mcp import server

        transports: list[str] = []
        monkeypatch.setattr(server, "run_server", lambda transport: transports.append(transport))
        main(["mcp", "serve", "--config", str(tmp_path / "missing.yaml")])

        assert "default nec2c" in capsys.readouterr().out
        assert transports == ["stdio"]
