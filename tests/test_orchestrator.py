import copy

import httpx
import pytest

from toolloop.core.llm_client import LLMClient, ModelClientError
from toolloop.core.orchestrator import Orchestrator, RunStatus
from toolloop.tools.base import Tool
from toolloop.tools.registry import ToolRegistry

from .fakes import FakeProvider, completion, tool_call


class ScriptedClient:
    """Stands in for LLMClient: hands out pre-baked messages in order."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls = []

    def chat(self, messages, tools, tool_choice="auto"):
        self.calls.append({"messages": copy.deepcopy(messages), "tools": tools, "tool_choice": tool_choice})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return dict(reply)


class RecordingTool(Tool):
    name = "record"
    description = "Record the call"
    properties = {"value": {"type": "string", "description": "Anything"}}

    def __init__(self, log):
        super().__init__()
        self.log = log

    def parse_request(self, args):
        return args

    def run(self, request):
        self.log.append(request.get("value"))
        return f"recorded {request.get('value')}"


def test_final_answer_without_tools(registry):
    client = ScriptedClient({"role": "assistant", "content": "4"})
    orchestrator = Orchestrator(client, registry)

    result = orchestrator.run("What is 2+2?")

    assert result.status is RunStatus.DONE
    assert result.answer == "4"
    assert result.iterations == 1
    assert client.calls[0]["messages"] == [{"role": "user", "content": "What is 2+2?"}]
    assert client.calls[0]["tool_choice"] == "auto"


def test_missing_role_defaults_to_assistant(registry):
    orchestrator = Orchestrator(ScriptedClient({"content": "ok"}), registry)
    orchestrator.run("hi")
    assert orchestrator.conversation.history()[-1] == {"role": "assistant", "content": "ok"}


def test_final_message_without_content(registry):
    result = Orchestrator(ScriptedClient({"role": "assistant"}), registry).run("hi")
    assert result.status is RunStatus.DONE
    assert result.answer is None


def test_tool_calls_run_in_order_and_feed_back():
    log = []
    registry = ToolRegistry()
    registry.register("record", RecordingTool(log))
    calls = [tool_call("a", "record", {"value": "first"}), tool_call("b", "record", {"value": "second"})]
    client = ScriptedClient({"role": "assistant", "content": None, "tool_calls": calls}, {"content": "Done."})
    orchestrator = Orchestrator(client, registry)

    result = orchestrator.run("go")

    assert log == ["first", "second"]
    assert result.answer == "Done."
    assert result.iterations == 2
    second_request = client.calls[1]["messages"]
    assert second_request[-2:] == [
        {"role": "tool", "tool_call_id": "a", "content": "recorded first"},
        {"role": "tool", "tool_call_id": "b", "content": "recorded second"},
    ]
    assert second_request[1]["tool_calls"] == calls


def test_unknown_tool_and_bad_arguments_are_recoverable(registry):
    calls = [tool_call("x", "launch_rockets", "{}"), tool_call("y", "read_file", "{not json")]
    client = ScriptedClient({"tool_calls": calls}, {"content": "gave up"})
    orchestrator = Orchestrator(client, registry)

    result = orchestrator.run("try it")

    assert result.status is RunStatus.DONE
    tool_messages = [m for m in orchestrator.conversation.history() if m["role"] == "tool"]
    assert tool_messages == [
        {"role": "tool", "tool_call_id": "x", "content": "ERROR: tool not found."},
        {"role": "tool", "tool_call_id": "y", "content": "ERROR: invalid arguments."},
    ]


def test_tool_descriptors_are_sent_unchanged_each_time(registry):
    client = ScriptedClient({"tool_calls": [tool_call("1", "bash", {"command": "sudo ls"})]}, {"content": "x"})
    Orchestrator(client, registry).run("go")
    assert client.calls[0]["tools"] is client.calls[1]["tools"]
    assert [t["function"]["name"] for t in client.calls[0]["tools"]] == ["read_file", "write_file", "bash"]


def test_iteration_limit(registry):
    looping = {"tool_calls": [tool_call("1", "nothing_here", "{}")]}
    client = ScriptedClient(*[looping] * 10)
    result = Orchestrator(client, registry, max_iterations=10).run("loop forever")

    assert result.status is RunStatus.LIMIT_EXCEEDED
    assert result.answer is None
    assert result.iterations == 10
    assert len(client.calls) == 10


def test_answer_on_last_allowed_iteration(registry):
    looping = {"tool_calls": [tool_call("1", "nothing_here", "{}")]}
    client = ScriptedClient(looping, looping, {"content": "just in time"})
    result = Orchestrator(client, registry, max_iterations=3).run("go")
    assert result.status is RunStatus.DONE
    assert result.answer == "just in time"


def test_conversation_bound_keeps_prompt(registry):
    batch = [tool_call(str(i), "nothing_here", "{}") for i in range(5)]
    looping = {"tool_calls": batch}
    client = ScriptedClient(*[looping] * 10)
    orchestrator = Orchestrator(client, registry, max_iterations=10, max_messages=8)

    orchestrator.run("the prompt")

    for request in client.calls:
        assert request["messages"][0] == {"role": "user", "content": "the prompt"}
    history = orchestrator.conversation.history()
    assert history[0] == {"role": "user", "content": "the prompt"}
    # at most one eviction per iteration (from the third on), so tool results pile up
    assert len(history) == 1 + 10 * 6 - 8


def test_model_failure_propagates_and_stops(registry):
    client = ScriptedClient(ModelClientError("HTTP error: 500\nboom"))
    orchestrator = Orchestrator(client, registry)

    with pytest.raises(ModelClientError):
        orchestrator.run("hi")
    assert orchestrator.conversation.history() == [{"role": "user", "content": "hi"}]


def test_scenario_read_file_then_answer(settings, registry, workspace):
    (workspace / "notes.txt").write_text("remember the milk", encoding="utf-8")
    provider = FakeProvider(
        completion(content=None, tool_calls=[tool_call("call_42", "read_file", {"path": "notes.txt"})]),
        completion(content="Done."),
    )
    client = LLMClient(settings, http_client=provider.http_client())

    result = Orchestrator(client, registry).run("Summarize notes.txt")

    assert result.answer == "Done."
    second = provider.bodies()[1]["messages"]
    assert second[-1] == {"role": "tool", "tool_call_id": "call_42", "content": "remember the milk"}
    assert second[-2]["tool_calls"][0]["id"] == "call_42"


def test_scenario_http_500(settings, registry):
    provider = FakeProvider(httpx.Response(500, text="server error"))
    orchestrator = Orchestrator(LLMClient(settings, http_client=provider.http_client()), registry)

    with pytest.raises(ModelClientError, match="HTTP error: 500"):
        orchestrator.run("hi")
    assert len(orchestrator.conversation) == 1


@pytest.mark.parametrize(
    "name, arguments, expected",
    [
        ("read_file", {"path": "a\u0000b"}, "ERROR: could not open file."),
        ("read_file", {"path": "\ud800"}, "ERROR: could not open file."),
        ("write_file", {"path": "a\u0000b", "content": "x"}, "ERROR: could not open file for writing."),
        ("write_file", {"path": "ok.txt", "content": "\ud800"}, "ERROR: content is not valid UTF-8."),
        ("bash", {"command": "echo \u0000"}, "ERROR: failed to execute command."),
    ],
)
def test_os_level_argument_failures_stay_in_conversation(registry, name, arguments, expected):
    client = ScriptedClient({"tool_calls": [tool_call("c", name, arguments)]}, {"content": "fine"})
    orchestrator = Orchestrator(client, registry)

    result = orchestrator.run("go")

    assert result.status is RunStatus.DONE
    assert result.answer == "fine"
    assert orchestrator.conversation.history()[-2] == {"role": "tool", "tool_call_id": "c", "content": expected}


@pytest.mark.parametrize("empty_calls", [[], None])
def test_empty_tool_calls_count_as_final_answer(registry, empty_calls):
    client = ScriptedClient({"content": "all done", "tool_calls": empty_calls})
    result = Orchestrator(client, registry).run("go")
    assert result.status is RunStatus.DONE
    assert result.answer == "all done"
    assert len(client.calls) == 1
