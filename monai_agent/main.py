"""
MonAI Agent - Command Line Entry Point
======================================

Chat with a MonAI agent from the terminal.

It:
1. Loads configuration (.env + environment)
2. Creates the wallet context from WALLET_ADDRESS
3. Creates the agent with the built-in tools
4. Sends one message (from the command line) or starts an interactive prompt

Run with:
    python -m monai_agent.main "What's my MON balance?"

Or after installing:
    monai-agent
"""

import asyncio
import signal
import sys

from monai_agent.agent import MonAIAgent, MonAIAgentConfig
from monai_agent.utils.logger import Logger

main_logger = Logger("Main")

DEFAULT_PROMPTS = (
    "You are MonAI, an assistant for the Monad network. "
    "Use the available tools to look up native and token balances. "
    "When the user asks about \"my\" balance, use their connected wallet."
)

EXIT_COMMANDS = {"exit", "quit"}


async def _read_line(prompt: str) -> str | None:
    """Read a line from stdin without blocking the event loop. None on EOF."""
    try:
        return await asyncio.to_thread(input, prompt)
    except EOFError:
        return None


async def _interactive(agent: MonAIAgent) -> None:
    """Prompt for messages until EOF or an exit command."""
    print("MonAI agent ready. Type 'exit' to quit.")

    while True:
        line = await _read_line("> ")
        if line is None or line.strip().lower() in EXIT_COMMANDS:
            break
        if not line.strip():
            continue

        try:
            answer = await agent.send_message(line)
        except Exception as e:
            main_logger.error("Message failed", e)
            continue

        print(answer)


async def main(argv: list[str] | None = None) -> int:
    """
    Main async entry point.

    Args:
        argv: Command line arguments (without the program name)

    Returns:
        Process exit code
    """
    argv = sys.argv[1:] if argv is None else argv

    try:
        main_logger.info("Creating agent...")
        agent = MonAIAgent(MonAIAgentConfig(prompts=DEFAULT_PROMPTS))

        await agent.initialize()
        main_logger.info(
            f"Using assistant {agent.assistant_id} on thread {agent.thread_id}"
        )

        if argv:
            print(await agent.send_message(" ".join(argv)))
        else:
            await _interactive(agent)

    except Exception as e:
        main_logger.error("Agent failed", e)
        return 1

    return 0


def run() -> None:
    """
    Synchronous entry point.

    This is called when running the `monai-agent` command.
    """
    signal.signal(signal.SIGTERM, lambda *_: sys.exit(0))
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        main_logger.info("Interrupted")


if __name__ == "__main__":
    run()
