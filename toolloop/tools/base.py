"""
Common shape of a tool: a JSON-schema descriptor plus ``execute(args) -> str``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict


ERROR_PREFIX = "ERROR: "
SUCCESS_PREFIX = "SUCCESS: "
MAX_BYTES = 1_000_000


def error_result(message: str) -> str:
    return f"{ERROR_PREFIX}{message}"


def success_result(message: str) -> str:
    return f"{SUCCESS_PREFIX}{message}"


class ToolArgumentError(ValueError):
    """Arguments did not match the tool's declared schema."""


def require_string(args: Dict[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str):
        raise ToolArgumentError(f"'{key}' must be a string")
    return value


class Tool:
    """A side-effecting capability the model may call.

    Subclasses declare ``name``, ``description`` and ``properties``, turn the
    raw argument dict into a request object in ``parse_request`` and do the
    work in ``run``. Failures are reported as ``"ERROR: ..."`` text, never
    raised, so the model can see them and try something else.
    """

    name: str = ""
    description: str = ""
    properties: Dict[str, Dict[str, str]] = {}

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    def parameters(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "properties": {key: dict(spec) for key, spec in self.properties.items()},
            "required": list(self.properties),
        }

    def descriptor(self, name: str | None = None) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": name or self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def parse_request(self, args: Dict[str, Any]):
        raise NotImplementedError

    def run(self, request) -> str:
        raise NotImplementedError

    def execute(self, args: Dict[str, Any]) -> str:
        try:
            request = self.parse_request(args)
        except ToolArgumentError as exc:
            self.logger.info("Rejected arguments: %s", exc)
            return error_result("invalid arguments.")
        try:
            return self.run(request)
        except Exception as exc:
            self.logger.warning("%s failed: %s", self.name, exc)
            return error_result(f"{self.name} failed: {exc}")
