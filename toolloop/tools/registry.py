"""
Tool registry with JSON-schema descriptors and dispatch.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

from ..core.safety import Safety
from .base import Tool, error_result
from .file_ops import ReadFileTool, WriteFileTool
from .shell import BashTool

TOOL_NOT_FOUND = error_result("tool not found.")

logger = logging.getLogger(__name__)


def parse_arguments(raw: Any) -> Dict[str, Any]:
    """Decode a tool call's ``arguments`` field.

    Providers send a JSON-encoded object. Anything that does not decode to an
    object (bad JSON, ``null``, a list, a bare string) becomes ``{}`` so the
    tool reports its own argument error instead of the run failing.
    """
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, (str, bytes, bytearray)):
        return {}
    try:
        args = json.loads(raw)
    except json.JSONDecodeError:
        logger.info("Tool arguments are not valid JSON, using {}")
        return {}
    return args if isinstance(args, dict) else {}


class ToolRegistry:
    def __init__(self):
        self.tools: Dict[str, Tool] = {}

    def register(self, name: str, tool: Tool):
        self.tools[name] = tool
        logger.debug("Registered tool %s", name)

    def lookup(self, name: str) -> Optional[Tool]:
        return self.tools.get(name)

    def names(self) -> List[str]:
        return list(self.tools)

    def descriptors(self) -> List[Dict[str, Any]]:
        return [tool.descriptor(name) for name, tool in self.tools.items()]

    def dispatch(self, name: str, raw_arguments: Any) -> str:
        tool = self.lookup(name)
        if tool is None:
            logger.warning("Unknown tool %s", name)
            return TOOL_NOT_FOUND
        logger.info("Executing tool %s", name)
        return tool.execute(parse_arguments(raw_arguments))


def build_registry(safety: Safety) -> ToolRegistry:
    registry = ToolRegistry()
    for tool in (ReadFileTool(safety), WriteFileTool(safety), BashTool(safety)):
        registry.register(tool.name, tool)
    return registry
