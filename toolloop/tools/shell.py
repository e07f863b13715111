from __future__ import annotations

import subprocess
from dataclasses import dataclass

from ..core.safety import Safety
from .base import MAX_BYTES, Tool, error_result, require_string

CHUNK_SIZE = 4096


@dataclass
class ShellRequest:
    command: str


class BashTool(Tool):
    """Run a command through the host shell and report its exit code and stdout.

    The blocklist in ``Safety.check_command`` is the only guard. Anything it
    does not spell out (aliases, ``eval``, encoded payloads) runs.
    """

    name = "bash"
    description = "Execute a shell command and return stdout and exit code"
    properties = {
        "command": {"type": "string", "description": "Shell command to execute"},
    }

    def __init__(self, safety: Safety, max_output: int = MAX_BYTES):
        super().__init__()
        self.safety = safety
        self.max_output = max_output

    def parse_request(self, args) -> ShellRequest:
        return ShellRequest(command=require_string(args, "command"))

    def run(self, request: ShellRequest) -> str:
        command = request.command
        if not command:
            return error_result("empty command.")
        try:
            self.safety.check_command(command)
        except PermissionError as exc:
            self.logger.warning("bash blocked: %s", command)
            return error_result(str(exc))

        self.logger.info("bash start cmd=%s", command)
        try:
            proc = subprocess.Popen(
                command,
                shell=True,
                cwd=self.safety.workspace,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
        except (OSError, ValueError) as exc:
            self.logger.warning("bash failed to spawn: %s", exc)
            return error_result("failed to execute command.")

        with proc:
            chunks = []
            total = 0
            while True:
                chunk = proc.stdout.read(CHUNK_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                if total > self.max_output:
                    proc.kill()
                    self.logger.warning("bash output exceeded %d bytes", self.max_output)
                    return error_result("output too large.")
                chunks.append(chunk)
            exit_code = proc.wait()

        self.logger.info("bash exit=%s", exit_code)
        output = b"".join(chunks).decode("utf-8", errors="replace")
        return f"EXIT_CODE: {exit_code}\nOUTPUT:\n{output}"
