"""Adapter around an external text-generation command-line tool."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence


@dataclass
class LLMRequest:
    """Represents one prompt sent to the external tool."""

    prompt: str
    executable: str
    args: List[str] = field(default_factory=list)
    timeout: Optional[float] = None


class LLMRunner:
    """Runs prompts through a CLI tool that reads stdin and writes the reply to stdout.

    The executable is used as given; resolving where it lives is left to the
    environment (``PATH`` or an absolute path in configuration). A missing
    tool, a timeout and a failing exit status all surface as ``RuntimeError``.
    """

    DEFAULT_EXECUTABLE = "claude"
    DEFAULT_ARGS: tuple[str, ...] = ("--print",)
    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        executable: str | None = None,
        *,
        args: Sequence[str] | None = None,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> None:
        self.executable = executable or self.DEFAULT_EXECUTABLE
        self.args = list(self.DEFAULT_ARGS if args is None else args)
        self.timeout = timeout
        self._runner = runner if runner is not None else self._cli_runner

    def run(self, prompt: str) -> str:
        """Send ``prompt`` to the tool and return its raw output."""
        request = LLMRequest(
            prompt=prompt,
            executable=self.executable,
            args=list(self.args),
            timeout=self.timeout,
        )
        return self._runner(request)

    @staticmethod
    def _cli_runner(request: LLMRequest) -> str:
        command = [request.executable, *request.args]
        try:
            completed = subprocess.run(
                command,
                input=request.prompt,
                capture_output=True,
                text=True,
                timeout=request.timeout,
                check=True,
            )
        except FileNotFoundError as exc:
            raise RuntimeError(f"Unable to locate '{request.executable}'") from exc
        except subprocess.TimeoutExpired as exc:
            raise RuntimeError(
                f"'{request.executable}' timed out after {request.timeout:g}s"
            ) from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit code {exc.returncode}"
            raise RuntimeError(f"'{request.executable}' failed: {detail}") from exc

        output = completed.stdout.strip()
        if not output:
            raise RuntimeError(f"'{request.executable}' returned no output")
        return output


__all__ = ["LLMRequest", "LLMRunner"]
