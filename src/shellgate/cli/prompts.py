"""Interactive consent prompter for the terminal."""

from __future__ import annotations

import asyncio

from rich.console import Console
from rich.prompt import Prompt
from rich.text import Text

from shellgate.exceptions import PromptError

console = Console()


class ConsentPrompt(Prompt):
    prompt_suffix = ""


async def terminal_prompter(text: str) -> str:
    """Ask on the terminal without blocking the event loop."""
    try:
        return await asyncio.to_thread(ConsentPrompt.ask, Text(text), console=console)
    except (EOFError, KeyboardInterrupt) as exc:
        raise PromptError("Input closed before an answer was given") from exc
