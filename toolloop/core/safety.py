"""
Guard heuristics for tool execution.

These are string-level checks, not a sandbox: there is no canonicalization,
no symlink resolution and no process isolation.
"""
from __future__ import annotations

from pathlib import Path


class Safety:
    def __init__(self, workspace: Path):
        self.workspace = Path(workspace)
        self.block_patterns = (
            "sudo",
            "rm -rf /",
        )

    def resolve(self, path: str) -> Path:
        """Join a tool-supplied path onto the workspace (absolute paths pass through)."""
        return self.workspace / path

    def check_read_path(self, path: str):
        if ".." in path:
            raise PermissionError("path traversal detected.")

    def check_write_path(self, path: str):
        if not path or ".." in path or path[0] in ("/", "\\") or ":" in path:
            raise PermissionError("invalid path.")

    def check_command(self, cmd: str):
        for pat in self.block_patterns:
            if pat in cmd:
                raise PermissionError("command not allowed.")
