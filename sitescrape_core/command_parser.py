"""
Command Parser - natural language instruction -> typed Command via an LLM.

    parser = LLMCommandParser(create_llm_client(llm_config))
    command = await parser.parse("en google scholar busca iot")
    # SearchSite(site="Google Scholar", query="iot")

Returns None when the model answers {"action": null}.
"""

import logging
from typing import Optional

from .commands import Command, command_from_dict
from .prompts import build_command_prompt

logger = logging.getLogger(__name__)


class LLMCommandParser:
    def __init__(self, llm_client):
        self.llm_client = llm_client
        self.system_prompt = build_command_prompt()

    async def parse(self, instruction: str) -> Optional[Command]:
        instruction = (instruction or "").strip()
        if not instruction:
            return None
        data = await self.llm_client.ainvoke_json(self.system_prompt, instruction)
        if not data.get("action"):
            logger.info(f"Instruction not understood: {instruction!r}")
            return None
        command = command_from_dict(data)
        logger.info(f"Parsed {instruction!r} -> {command}")
        return command
