"""
Orchestrator drives the model call / tool dispatch cycle.

Each pass sends the whole conversation to the model. A reply carrying tool
calls has every call executed in order and the results appended; a reply
without tool calls is the final answer. Provider failures surface as
``ModelClientError`` and end the run, tool failures are plain result text the
model gets to read on the next pass.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .config import DEFAULT_MAX_ITERATIONS, DEFAULT_MAX_MESSAGES
from .conversation import Conversation
from ..tools.registry import ToolRegistry


class RunStatus(str, Enum):
    DONE = "done"
    LIMIT_EXCEEDED = "limit_exceeded"


@dataclass
class RunResult:
    status: RunStatus
    answer: Optional[str]
    iterations: int


class Orchestrator:
    def __init__(
        self,
        client,
        registry: ToolRegistry,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        max_messages: int = DEFAULT_MAX_MESSAGES,
    ):
        self.client = client
        self.registry = registry
        self.max_iterations = max_iterations
        self.max_messages = max_messages
        self.tool_descriptors = registry.descriptors()
        self.conversation: Optional[Conversation] = None
        self.logger = logging.getLogger(__name__)

    def run(self, prompt: str) -> RunResult:
        conversation = Conversation(prompt, max_messages=self.max_messages)
        self.conversation = conversation
        iterations = 0
        while iterations < self.max_iterations:
            iterations += 1
            self.logger.debug("Iteration %d with %d messages", iterations, len(conversation))
            reply = self.client.chat(conversation.history(), tools=self.tool_descriptors, tool_choice="auto")
            message = conversation.add_assistant(reply)
            if conversation.trim():
                self.logger.debug("Conversation over %d messages, evicted index 1", self.max_messages)

            tool_calls = message.get("tool_calls")
            if tool_calls:
                for call in tool_calls:
                    self._dispatch(call, conversation)
                continue

            self.logger.debug("Final answer after %d iterations", iterations)
            return RunResult(RunStatus.DONE, message.get("content"), iterations)

        self.logger.warning("Max tool iterations (%d) exceeded", self.max_iterations)
        return RunResult(RunStatus.LIMIT_EXCEEDED, None, iterations)

    def _dispatch(self, call: Dict[str, Any], conversation: Conversation):
        if not isinstance(call, dict):
            call = {}
        function = call.get("function")
        if not isinstance(function, dict):
            function = {}
        call_id = call.get("id") or ""
        name = function.get("name") or ""
        self.logger.info("Dispatching tool call %s id=%s", name, call_id)
        result = self.registry.dispatch(name, function.get("arguments"))
        conversation.add_tool_result(call_id, result)
