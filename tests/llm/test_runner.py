"""Tests for the external text-generation runner."""

from __future__ import annotations

import subprocess

import pytest

from codemap.llm.runner import LLMRequest, LLMRunner


def test_llm_runner_constructs_request() -> None:
    captured = {}

    def fake_runner(request: LLMRequest) -> str:
        captured["prompt"] = request.prompt
        captured["executable"] = request.executable
        captured["args"] = request.args
        captured["timeout"] = request.timeout
        return "response"

    runner = LLMRunner("my-tool", args=["--print", "--quiet"], timeout=12.0, runner=fake_runner)
    result = runner.run("Describe this file")

    assert result == "response"
    assert captured == {
        "prompt": "Describe this file",
        "executable": "my-tool",
        "args": ["--print", "--quiet"],
        "timeout": 12.0,
    }


def test_llm_runner_defaults() -> None:
    runner = LLMRunner()

    assert runner.executable == "claude"
    assert runner.args == ["--print"]
    assert runner.timeout == 30.0


def test_llm_runner_sends_prompt_on_stdin(monkeypatch) -> None:
    captured = {}

    def fake_run(command, input, capture_output, text, timeout, check):  # noqa: A002
        captured["command"] = command
        captured["input"] = input
        captured["timeout"] = timeout
        captured["check"] = check
        return subprocess.CompletedProcess(command, 0, stdout='  {"fileDescription": "x"}\n', stderr="")

    monkeypatch.setattr("codemap.llm.runner.subprocess.run", fake_run)

    output = LLMRunner("claude", timeout=5.0).run("prompt text")

    assert output == '{"fileDescription": "x"}'
    assert captured == {
        "command": ["claude", "--print"],
        "input": "prompt text",
        "timeout": 5.0,
        "check": True,
    }


def test_llm_runner_missing_executable_raises_runtime_error(monkeypatch) -> None:
    def fake_run(command, **kwargs):
        raise FileNotFoundError(command[0])

    monkeypatch.setattr("codemap.llm.runner.subprocess.run", fake_run)

    with pytest.raises(RuntimeError, match="Unable to locate 'ghost'"):
        LLMRunner("ghost").run("prompt")


def test_llm_runner_timeout_raises_runtime_error(monkeypatch) -> None:
    def fake_run(command, **kwargs):
        raise subprocess.TimeoutExpired(command, kwargs["timeout"])

    monkeypatch.setattr("codemap.llm.runner.subprocess.run", fake_run)

    with pytest.raises(RuntimeError, match="timed out after 30s"):
        LLMRunner("claude").run("prompt")


def test_llm_runner_failing_exit_status_reports_stderr(monkeypatch) -> None:
    def fake_run(command, **kwargs):
        raise subprocess.CalledProcessError(2, command, output="", stderr="not logged in\n")

    monkeypatch.setattr("codemap.llm.runner.subprocess.run", fake_run)

    with pytest.raises(RuntimeError, match="'claude' failed: not logged in"):
        LLMRunner("claude").run("prompt")


def test_llm_runner_empty_output_raises_runtime_error(monkeypatch) -> None:
    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(command, 0, stdout="   \n", stderr="")

    monkeypatch.setattr("codemap.llm.runner.subprocess.run", fake_run)

    with pytest.raises(RuntimeError, match="returned no output"):
        LLMRunner("claude").run("prompt")
