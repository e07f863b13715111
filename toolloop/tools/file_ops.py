from __future__ import annotations

import os
from dataclasses import dataclass

from ..core.safety import Safety
from .base import MAX_BYTES, Tool, error_result, require_string, success_result


@dataclass
class ReadRequest:
    path: str


@dataclass
class WriteRequest:
    path: str
    content: str


class ReadFileTool(Tool):
    name = "read_file"
    description = "Read and return the contents of a file"
    properties = {
        "path": {"type": "string", "description": "The path to the file to read"},
    }

    def __init__(self, safety: Safety, max_bytes: int = MAX_BYTES):
        super().__init__()
        self.safety = safety
        self.max_bytes = max_bytes

    def parse_request(self, args) -> ReadRequest:
        return ReadRequest(path=require_string(args, "path"))

    def run(self, request: ReadRequest) -> str:
        try:
            self.safety.check_read_path(request.path)
        except PermissionError as exc:
            self.logger.info("read_file blocked: %s", request.path)
            return error_result(str(exc))

        try:
            f = open(self.safety.resolve(request.path), "rb")
        except (OSError, ValueError):
            return error_result("could not open file.")

        with f:
            try:
                size = os.fstat(f.fileno()).st_size
            except OSError:
                size = -1
            if size <= 0:
                return error_result("could not determine file size.")
            if size > self.max_bytes:
                return error_result("file too large.")
            try:
                data = f.read(size)
            except OSError:
                return error_result("file read failed.")

        if len(data) != size:
            return error_result("file read failed.")
        self.logger.info("read_file %s (%d bytes)", request.path, size)
        return data.decode("utf-8", errors="replace")


class WriteFileTool(Tool):
    name = "write_file"
    description = "Write content to a file (overwrites if exists)"
    properties = {
        "path": {"type": "string", "description": "The path to the file to write"},
        "content": {"type": "string", "description": "content to write into file"},
    }

    def __init__(self, safety: Safety, max_bytes: int = MAX_BYTES):
        super().__init__()
        self.safety = safety
        self.max_bytes = max_bytes

    def parse_request(self, args) -> WriteRequest:
        return WriteRequest(path=require_string(args, "path"), content=require_string(args, "content"))

    def run(self, request: WriteRequest) -> str:
        try:
            self.safety.check_write_path(request.path)
        except PermissionError as exc:
            self.logger.info("write_file blocked: %r", request.path)
            return error_result(str(exc))

        try:
            payload = request.content.encode("utf-8")
        except UnicodeEncodeError:
            return error_result("content is not valid UTF-8.")
        if len(payload) > self.max_bytes:
            return error_result("content too large.")

        # Truncates in place; a failed write is not rolled back.
        try:
            f = open(self.safety.resolve(request.path), "wb")
        except (OSError, ValueError):
            return error_result("could not open file for writing.")
        try:
            with f:
                f.write(payload)
        except OSError:
            return error_result("write failed.")

        self.logger.info("write_file %s (%d bytes)", request.path, len(payload))
        return success_result("file written.")
