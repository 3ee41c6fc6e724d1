"""
Schema inference via LLM.

The model receives simplified HTML plus page URL and title and answers with
a raw schema dict (see prompts.ANALYZE_PAGE_PROMPT). Only the presence of a
"selectors" object is checked here; the dispatcher validates
resultContainer and fills defaults.
"""

import logging
from typing import Any, Dict

from .errors import LLMError, SchemaInferenceFailed
from .prompts import ANALYZE_PAGE_PROMPT, build_analyze_page_message

logger = logging.getLogger(__name__)


class LLMSchemaInferrer:
    def __init__(self, llm_client):
        self.llm_client = llm_client

    async def infer(self, simplified_html: str, url: str, page_title: str) -> Dict[str, Any]:
        message = build_analyze_page_message(simplified_html, url, page_title)
        try:
            result = await self.llm_client.ainvoke_json(ANALYZE_PAGE_PROMPT, message)
        except LLMError as e:
            raise SchemaInferenceFailed(f"Page analysis failed: {e}") from e
        if not isinstance(result.get("selectors"), dict):
            raise SchemaInferenceFailed("The LLM could not identify the structure of the page")
        logger.info(f"Inferred schema for {url}: container={result['selectors'].get('resultContainer')!r}")
        return result
