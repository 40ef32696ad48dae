"""Chat assistant answering questions about the incident data."""

import logging
from datetime import date
from typing import Any

from crimecast.exceptions import OracleError
from crimecast.services.gemini_client import GeminiClient, content_text, function_calls
from crimecast.services.incident_store import IncidentStore
from crimecast.services.query_tool import GET_CRIME_DATA_DECLARATION, TOOL_NAME, run_tool_call

logger = logging.getLogger(__name__)

FALLBACK_ANSWER = "I'm sorry, I was unable to process that request."

SYSTEM_PROMPT = """You are a helpful assistant that answers questions about crime data.

Instructions:
1. Use the available 'getCrimeData' tool to answer the user's question as accurately as possible.
2. Synthesize the data returned by the tool into a clear, natural language answer.
3. If the tool returns no data, state that you couldn't find any information for that query.
4. Today's date is {today}. Resolve relative dates ("last month", "since August") against it.
5. Answer in plain text."""


class ChatAssistant:
    """Tool-calling chat loop over the incident store."""

    def __init__(self, client: GeminiClient, store: IncidentStore, max_tool_rounds: int = 4):
        self.client = client
        self.store = store
        self.max_tool_rounds = max_tool_rounds

    async def ask(self, question: str, today: date | None = None) -> str:
        """
        Answer a free-text question.

        The model may call ``getCrimeData`` up to ``max_tool_rounds`` times.
        Oracle failures and empty output produce a fixed apology.
        """
        system_prompt = SYSTEM_PROMPT.format(today=(today or date.today()).isoformat())
        contents: list[dict[str, Any]] = [{"role": "user", "parts": [{"text": question}]}]
        tools = [{"functionDeclarations": [GET_CRIME_DATA_DECLARATION]}]

        try:
            for _ in range(self.max_tool_rounds + 1):
                content = await self.client.generate_content(
                    contents, tools=tools, system_instruction=system_prompt
                )
                calls = function_calls(content)
                if not calls:
                    return content_text(content) or FALLBACK_ANSWER

                contents.append({"role": "model", "parts": content.get("parts", [])})
                contents.append({"role": "user", "parts": self._run_calls(calls)})

            logger.warning(f"Chat exceeded {self.max_tool_rounds} tool rounds")
        except OracleError as e:
            logger.warning(f"Chat assistant failed: {e}")

        return FALLBACK_ANSWER

    def _run_calls(self, calls: list[dict[str, Any]]) -> list[dict[str, Any]]:
        parts = []
        for call in calls:
            name = call.get("name")
            if name == TOOL_NAME:
                response = run_tool_call(self.store, call.get("args"))
            else:
                logger.warning(f"Model requested unknown tool {name!r}")
                response = {"error": f"Unknown tool: {name}"}
            parts.append({"functionResponse": {"name": name, "response": response}})
        return parts
