from __future__ import annotations

import logging
from pathlib import Path

import pytest

from archivenet_setup import build
from archivenet_setup.build import check_required_files, ensure_artifact, probe_server
from archivenet_setup.config import Settings
from archivenet_setup.errors import BuildFailed, MissingArtifact, MissingEnvFile

from conftest import RecordingExecutor


def test_existing_artifact_skips_build(project: Settings) -> None:
    executor = RecordingExecutor()
    assert ensure_artifact(project, executor=executor) is False
    assert executor.calls == []


def test_missing_artifact_runs_build(settings: Settings) -> None:
    executor = RecordingExecutor(creates=settings.server_path)
    assert ensure_artifact(settings, executor=executor) is True
    assert executor.calls == [(["npm", "run", "build"], settings.project_root)]
    assert settings.server_path.exists()


def test_failing_build_raises(settings: Settings) -> None:
    with pytest.raises(BuildFailed) as info:
        ensure_artifact(settings, executor=RecordingExecutor(status=2))
    assert "exit status 2" in str(info.value)


def test_unstartable_build_tool_raises(settings: Settings) -> None:
    class MissingTool:
        def run(self, argv, cwd):
            raise FileNotFoundError(argv[0])

    with pytest.raises(BuildFailed):
        ensure_artifact(settings, executor=MissingTool())


def test_check_required_files(settings: Settings) -> None:
    with pytest.raises(MissingArtifact):
        check_required_files(settings)

    settings.server_path.parent.mkdir(parents=True)
    settings.server_path.write_text("")
    with pytest.raises(MissingEnvFile):
        check_required_files(settings)

    settings.env_path.write_text("")
    check_required_files(settings)


def test_probe_failure_is_only_a_warning(
    project: Settings, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    async def broken_handshake(params):
        raise ConnectionError("server exited")

    monkeypatch.setattr(build, "_handshake", broken_handshake)
    with caplog.at_level(logging.WARNING):
        assert probe_server(project, {"INSERT_CONTEXT_ENDPOINT": "x"}) is False
    assert "server exited" in caplog.text


def test_probe_success_passes_entry_env(project: Settings, monkeypatch: pytest.MonkeyPatch) -> None:
    seen = []

    async def fake_handshake(params):
        seen.append(params)
        return ["insert_context", "search_context"]

    monkeypatch.setattr(build, "_handshake", fake_handshake)
    assert probe_server(project, {"API_KEY": "k"}) is True
    assert seen[0].command == "node"
    assert seen[0].args == [str(project.server_path)]
    assert seen[0].env == {"API_KEY": "k"}


def test_probe_times_out(project: Settings, monkeypatch: pytest.MonkeyPatch) -> None:
    import asyncio

    async def hanging_handshake(params):
        await asyncio.sleep(10)
        return []

    monkeypatch.setattr(build, "_handshake", hanging_handshake)
    quick = Settings(project_root=project.project_root, home=project.home, probe_timeout=0.05)
    assert probe_server(quick, {}) is False


def test_subprocess_executor_reports_exit_status(tmp_path: Path) -> None:
    import sys

    executor = build.SubprocessExecutor()
    assert executor.run([sys.executable, "-c", "raise SystemExit(3)"], tmp_path) == 3
