"""
Entry point for the toolloop CLI.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Support running both as `python -m toolloop.cli.main` and via direct path execution.
if __package__ is None or __package__ == "":
    project_root = Path(__file__).resolve().parents[2]
    sys.path.insert(0, str(project_root))
    from toolloop.core import colors
    from toolloop.core.config import ConfigError, load_settings
    from toolloop.core.llm_client import LLMClient, ModelClientError
    from toolloop.core.logging_utils import setup_logging
    from toolloop.core.orchestrator import Orchestrator, RunStatus
    from toolloop.core.safety import Safety
    from toolloop.tools.registry import build_registry
else:
    from ..core import colors
    from ..core.config import ConfigError, load_settings
    from ..core.llm_client import LLMClient, ModelClientError
    from ..core.logging_utils import setup_logging
    from ..core.orchestrator import Orchestrator, RunStatus
    from ..core.safety import Safety
    from ..tools.registry import build_registry


class ArgumentParser(argparse.ArgumentParser):
    """Report usage errors as ConfigError so they exit like any other fatal error."""

    def error(self, message):
        raise ConfigError(f"{self.format_usage()}{self.prog}: error: {message}")


def build_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(prog="toolloop", description="Run a prompt through a tool-calling model loop.")
    parser.add_argument("-p", "--prompt", help="Prompt to send to the model")
    parser.add_argument("--model", help="Override the configured model name")
    parser.add_argument("--max-iterations", type=int, help="Override the model call limit")
    parser.add_argument("--config", type=Path, help="Path to a settings.toml file")
    return parser


def _fail(message: str) -> int:
    print(colors.error(message), file=sys.stderr)
    return 1


def main(argv=None) -> int:
    try:
        args = build_parser().parse_args(argv)
    except ConfigError as exc:
        return _fail(str(exc))
    if not args.prompt:
        return _fail("Expected a non-empty prompt: toolloop -p \"<prompt>\"")

    try:
        settings = load_settings(args.config)
        if args.model:
            settings.model = args.model
        if args.max_iterations is not None:
            if args.max_iterations <= 0:
                raise ConfigError(f"max_iterations must be positive, got {args.max_iterations}")
            settings.max_iterations = args.max_iterations
    except ConfigError as exc:
        return _fail(str(exc))

    setup_logging(settings)
    logger = logging.getLogger(__name__)

    registry = build_registry(Safety(settings.workspace))
    orchestrator = Orchestrator(
        LLMClient(settings),
        registry,
        max_iterations=settings.max_iterations,
        max_messages=settings.max_messages,
    )

    try:
        result = orchestrator.run(args.prompt)
    except ModelClientError as exc:
        return _fail(str(exc))

    logger.info("Run finished status=%s iterations=%d", result.status.value, result.iterations)

    if result.status is RunStatus.LIMIT_EXCEEDED:
        print(colors.warning("Max tool iterations exceeded."), file=sys.stderr)
        return 0

    if result.answer is not None:
        print(result.answer)
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
