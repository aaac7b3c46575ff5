"""Terminal implementation of the operator prompts."""

import asyncio
import getpass
from dataclasses import dataclass

from student_records.services.interaction import Prompter


@dataclass
class ConsolePrompter(Prompter):
    """Prompter that asks on stdin; blank answers count as cancel."""

    async def confirm(self, title: str) -> bool:
        answer = await asyncio.to_thread(input, f"{title} [y/N] ")
        return answer.strip().lower() in {"y", "yes"}

    async def ask_secret(self, title: str) -> str | None:
        answer = await asyncio.to_thread(getpass.getpass, f"{title}: ")
        return answer or None

    async def ask_text(self, title: str) -> str | None:
        answer = await asyncio.to_thread(input, f"{title}: ")
        return answer.strip() or None
