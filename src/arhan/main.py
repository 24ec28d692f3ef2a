"""Main entry point for the arhan CLI.

Handles configuration, client construction and the interaction loop.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from rich.console import Console

from . import __version__, ui
from .agent import Agent
from .clients.openrouter import OpenRouterClient
from .config import (
    DEFAULT_HISTORY_FILE,
    DEFAULT_MAX_ITERATIONS,
    Settings,
    get_settings,
    load_yaml_config,
    resolve_model,
)
from .exceptions import AgentError, ConfigurationError
from .logging import get_logger, setup_logging
from .tools import get_default_tools
from .types import AgentConfig

logger = get_logger(__name__)

EXIT_WORDS = ("exit", "quit")
CLEAR_WORD = "clear"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arhan",
        description="Autonomous AI coding agent for the terminal",
    )
    parser.add_argument(
        "task",
        nargs="?",
        help="The coding task to perform (omit for interactive mode)"
    )
    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Auto-approve all tool executions"
    )
    parser.add_argument(
        "-m", "--model",
        help="OpenRouter model to use (overrides config.yaml and OPENROUTER_MODEL)"
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=DEFAULT_MAX_ITERATIONS,
        help=f"Maximum model turns per task (default: {DEFAULT_MAX_ITERATIONS})"
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Clear conversation history"
    )
    parser.add_argument(
        "--history",
        default=DEFAULT_HISTORY_FILE,
        help=f"Conversation history file (default: {DEFAULT_HISTORY_FILE})"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show a preview of every tool output"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (also settable via ARHAN_LOG_LEVEL env var)"
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to this file instead of stderr (also ARHAN_LOG_FILE)"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    return parser


def build_client(settings: Settings, model: str, yaml_config: dict) -> OpenRouterClient:
    """Create the OpenRouter client.

    Raises:
        ConfigurationError: If no API key is configured.
    """
    if not settings.openrouter_api_key:
        raise ConfigurationError("OPENROUTER_API_KEY environment variable is required")

    # model is resolved separately, the rest are request parameters
    llm_config = yaml_config.get("llm") or {}
    client_config = {k: v for k, v in llm_config.items() if k != "model"}

    return OpenRouterClient(
        api_key=settings.openrouter_api_key,
        model=model,
        base_url=settings.openrouter_base_url,
        default_headers=settings.default_headers(),
        client_config=client_config,
    )


async def run_task(agent: Agent, task: str, console: Console) -> bool:
    """Run one task and report how it ended.

    Returns:
        False if the model request failed, True otherwise.
    """
    console.print(ui.task_start(task))
    result = await agent.run(task)
    if result.is_completed:
        console.print(ui.complete())
    return not result.is_error


async def run_repl(agent: Agent, console: Console) -> None:
    """Keep prompting for tasks until the user leaves.

    An empty line, ``exit`` or ``quit`` ends the loop; ``clear`` wipes the
    history and keeps prompting. A failed task is reported and the loop
    goes on.
    """
    while True:
        task = console.input(ui.prompt()).strip()

        if not task or task.lower() in EXIT_WORDS:
            console.print(ui.goodbye())
            return

        if task.lower() == CLEAR_WORD:
            agent.clear_history()
            console.print(ui.history_cleared())
            console.print()
            continue

        try:
            await run_task(agent, task, console)
        except AgentError as e:
            console.print(ui.error(str(e)))
        except Exception as e:
            logger.exception("task failed")
            console.print(ui.error(f"Unexpected error: {type(e).__name__}: {e}"))
        console.print()


async def _main_async(args: argparse.Namespace, agent: Agent, console: Console) -> int:
    if args.task is None:
        await run_repl(agent, console)
        return 0
    return 0 if await run_task(agent, args.task, console) else 1


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the arhan CLI."""
    args = build_parser().parse_args(argv)
    console = Console()

    settings = get_settings()
    # setup logging early
    setup_logging(args.log_level or settings.log_level, args.log_file)

    yaml_config = load_yaml_config()
    model = resolve_model(args.model, yaml_config, settings)

    try:
        client = build_client(settings, model, yaml_config)
        config = AgentConfig(
            model=model,
            auto_approve=args.yes,
            max_iterations=args.max_iterations,
            history_file=Path.cwd() / args.history,
        )
    except ConfigurationError:
        console.print(ui.missing_api_key())
        sys.exit(1)
    except ValueError as e:
        console.print(ui.error(str(e)))
        sys.exit(1)

    agent = Agent(client, config, get_default_tools(), console=console, verbose=args.verbose)
    agent.initialize()

    if args.clear:
        agent.clear_history()
        console.print(ui.history_cleared())
        if args.task is None:
            return

    console.print(ui.welcome())
    console.print(ui.info(f"Model: {model.split('/')[-1] or model}"))
    console.print(ui.info(f"Auto-approve: {'enabled' if config.auto_approve else 'disabled'}"))
    console.print()

    try:
        exit_code = asyncio.run(_main_async(args, agent, console))
    except (KeyboardInterrupt, EOFError):
        console.print()
        console.print(ui.goodbye())
        exit_code = 0
    except AgentError as e:
        console.print(ui.error(str(e)))
        exit_code = 1
    except Exception as e:
        logger.exception("unexpected error")
        console.print(ui.error(f"Unexpected error: {type(e).__name__}: {e}"))
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
