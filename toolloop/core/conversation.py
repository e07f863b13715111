"""
Conversation utilities: bounded message store and role helpers.
"""
from __future__ import annotations

from typing import List, Dict

from .config import DEFAULT_MAX_MESSAGES


SYSTEM_ROLE = "system"
USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"
TOOL_ROLE = "tool"


class Conversation:
    """Ordered message log whose first entry is the initial user prompt.

    The log only grows by appending. When it holds more than ``max_messages``
    entries, ``trim`` drops the message at index 1; index 0 stays put.
    """

    def __init__(self, prompt: str, max_messages: int = DEFAULT_MAX_MESSAGES):
        self.max_messages = max_messages
        self.messages: List[Dict] = [{"role": USER_ROLE, "content": prompt}]

    def __len__(self) -> int:
        return len(self.messages)

    def add_message(self, message: Dict):
        self.messages.append(message)

    def add_assistant(self, message: Dict) -> Dict:
        """Append a model message, defaulting its role to assistant."""
        message = dict(message)
        if not message.get("role"):
            message["role"] = ASSISTANT_ROLE
        self.messages.append(message)
        return message

    def add_tool_result(self, tool_call_id: str, content: str):
        self.messages.append({"role": TOOL_ROLE, "tool_call_id": tool_call_id, "content": content})

    def trim(self) -> bool:
        """Evict a single message at index 1 if the log is over its bound."""
        if len(self.messages) > self.max_messages:
            del self.messages[1]
            return True
        return False

    def history(self) -> List[Dict]:
        return list(self.messages)
