"""Bounded model/tool conversation loop."""

import logging
from typing import List

from ..context.models import ConversationTurn
from ..errors import AgentLoopError
from ..llm.base import BaseLLM
from ..tools.base import ToolContext
from ..tools.dispatcher import ToolDispatcher
from ..tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I couldn't finish that response. Try splitting your request into smaller steps."


class AgentTurnLoop:
    """Drives one user request to a final text reply.

    The loop alternates between waiting on the model and executing the tools
    it asks for. Each model response either ends the request with text or
    requests a batch of tool calls whose outcomes are fed back, correlated by
    call ID, in the next request. Tool turns live only in the transcript of
    the current request and are never written to conversation history.
    """

    def __init__(
        self,
        llm: BaseLLM,
        registry: ToolRegistry,
        dispatcher: ToolDispatcher,
        max_rounds: int = 10,
    ):
        """
        Initialize the loop.

        Args:
            llm: Model used for every round
            registry: Source of the tool schemas advertised to the model
            dispatcher: Executes requested tool calls
            max_rounds: Maximum number of tool batches per request
        """
        self.llm = llm
        self.registry = registry
        self.dispatcher = dispatcher
        self.max_rounds = max_rounds

    async def run(
        self,
        history: List[ConversationTurn],
        user_message: str,
        context: ToolContext,
        system_prompt: str,
    ) -> str:
        """
        Run the loop for one user message.

        Args:
            history: Prior user/assistant turns, oldest first
            user_message: The new message
            context: Profile and message handed to every tool
            system_prompt: Prompt for this request

        Returns:
            Final reply text

        Raises:
            AgentLoopError: If the model still requests tools after max_rounds batches
        """
        transcript = _drop_leading_assistant(history) + [ConversationTurn.user(user_message)]
        tools = self.registry.get_schemas()
        rounds = 0

        while True:
            response = await self.llm.generate(transcript, system_prompt=system_prompt, tools=tools)

            if not response.wants_tools:
                if not response.text:
                    logger.warning(f"Model ended without text (stop reason: {response.stop_reason})")
                return response.text or FALLBACK_REPLY

            if rounds >= self.max_rounds:
                raise AgentLoopError(
                    f"Model still requested tools after {self.max_rounds} rounds"
                )
            rounds += 1

            logger.info(
                f"Round {rounds}: executing {[call.name for call in response.tool_calls]}"
            )
            outcomes = await self.dispatcher.dispatch_all(response.tool_calls, context)

            transcript.append(
                ConversationTurn(
                    role="assistant", text=response.text, tool_calls=list(response.tool_calls)
                )
            )
            transcript.append(ConversationTurn(role="user", tool_results=outcomes))


def _drop_leading_assistant(history: List[ConversationTurn]) -> List[ConversationTurn]:
    # Providers reject a conversation that opens with the assistant.
    start = 0
    while start < len(history) and history[start].role != "user":
        start += 1
    return list(history[start:])
