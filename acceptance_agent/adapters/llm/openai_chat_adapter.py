"""
OpenAI adapter for streamed chat with tools (function-calling).
"""

import json
import logging
from collections.abc import AsyncIterator, Iterable
from typing import Any, Optional, cast

from openai import AsyncOpenAI
from openai.types.chat import ChatCompletionMessageParam, ChatCompletionToolParam
from typing_extensions import override

from acceptance_agent.config.settings import settings
from acceptance_agent.exceptions import LLMError
from acceptance_agent.ports.llm.chat_port import ChatPort
from acceptance_agent.ports.llm.tools_port import ToolsHandlerPort

DEFAULT_SYSTEM_MESSAGE = (
    "You are the Visa Acceptance Agent Toolkit prototype. Use the official Visa "
    "Acceptance agent tools to help merchants manage invoices and payment links. "
    "Be concise and include relevant identifiers in your responses."
)

CHAT_ROLES = {"system", "user", "assistant"}


def sse_event(event: str, payload: object) -> str:
    """Format one Server-Sent Events frame."""
    return f"event: {event}\n" + "data: " + json.dumps(payload, ensure_ascii=False) + "\n\n"


class OpenAIChatAdapter(ChatPort):
    """Chat runtime on the OpenAI chat completions API, streamed token by token."""

    def __init__(
        self,
        tools_handler: ToolsHandlerPort,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        max_steps: Optional[int] = None,
        client: Optional[AsyncOpenAI] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the chat adapter.

        Args:
            tools_handler: Handler exposing and dispatching the payments tools
            api_key: OpenAI API key (defaults to settings)
            model: Model name (defaults to settings)
            api_base: API base URL (defaults to settings)
            max_steps: Maximum tool rounds per turn (defaults to settings)
            client: Pre-built AsyncOpenAI client
            logger: Logger instance to use for logging
        """
        self._tools_handler = tools_handler
        self.model: str = model or settings.openai_model
        self.api_base: str = api_base or settings.openai_api_base
        self._max_steps: int = max_steps or settings.agent_tool_max_steps
        self._logger: logging.Logger = logger or logging.getLogger(__name__)
        if client is not None:
            self.client = client
        else:
            self.client = AsyncOpenAI(
                api_key=api_key or settings.require_openai_api_key(),
                base_url=self.api_base,
            )

    @override
    def get_model_info(self) -> dict[str, Any]:
        return {"provider": "openai", "model": self.model}

    def _to_openai_tools(self) -> list[dict[str, Any]]:
        tools: list[dict[str, Any]] = []
        for spec in self._tools_handler.available_tools():
            tools.append(
                {
                    "type": "function",
                    "function": {
                        "name": spec["name"],
                        "description": spec["description"],
                        "parameters": spec["parameters"],
                    },
                }
            )
        return tools

    def _message_text(self, message: dict[str, Any]) -> Optional[str]:
        content = message.get("content")
        if isinstance(content, str):
            return content
        # UI clients may send {"parts": [{"type": "text", "text": ...}]}
        parts = message.get("parts") if content is None else content
        if isinstance(parts, list):
            texts = [
                str(p.get("text"))
                for p in parts
                if isinstance(p, dict) and p.get("type") == "text" and p.get("text")
            ]
            return "\n".join(texts) if texts else None
        return None

    def _prepare_messages(
        self, messages: list[dict[str, Any]], system_message: Optional[str]
    ) -> list[ChatCompletionMessageParam]:
        """
        Keep plain chat turns and put the system message first.

        Raises:
            LLMError: If no user or assistant turn remains
        """
        prepared: list[dict[str, Any]] = [
            {"role": "system", "content": system_message or DEFAULT_SYSTEM_MESSAGE}
        ]
        for message in messages:
            if not isinstance(message, dict):
                continue
            role = message.get("role")
            text = self._message_text(message)
            if role not in CHAT_ROLES or text is None:
                continue
            prepared.append({"role": role, "content": text})
        if len(prepared) == 1:
            raise LLMError("At least one user message is required")
        return cast(list[ChatCompletionMessageParam], prepared)

    async def _run_tool_calls(
        self,
        tool_calls: list[dict[str, str]],
        messages: list[ChatCompletionMessageParam],
    ) -> AsyncIterator[str]:
        messages.append(
            cast(
                ChatCompletionMessageParam,
                {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {
                            "id": call["id"],
                            "type": "function",
                            "function": {
                                "name": call["name"],
                                "arguments": call["arguments"] or "{}",
                            },
                        }
                        for call in tool_calls
                    ],
                },
            )
        )
        for call in tool_calls:
            name = call["name"]
            try:
                arguments = json.loads(call["arguments"] or "{}")
            except json.JSONDecodeError:
                arguments = {}
            if not isinstance(arguments, dict):
                arguments = {}
            yield sse_event("step", {"phase": "call", "name": name, "arguments": arguments})
            try:
                result = str(await self._tools_handler.dispatch(name, arguments))
                yield sse_event("step", {"phase": "result", "name": name, "result": result})
            except Exception as tool_exc:
                # Hand the error back to the model so it can correct itself
                self._logger.warning(f"Tool {name} failed: {tool_exc}")
                result = json.dumps({"error": str(tool_exc)}, ensure_ascii=False)
                yield sse_event("step", {"phase": "error", "name": name, "error": str(tool_exc)})
            messages.append(
                cast(
                    ChatCompletionMessageParam,
                    {"role": "tool", "tool_call_id": call["id"], "content": result},
                )
            )

    async def _run_turn(
        self, conversation: list[ChatCompletionMessageParam]
    ) -> AsyncIterator[str]:
        tools = self._to_openai_tools()
        for _ in range(self._max_steps):
            stream = await self.client.chat.completions.create(
                model=self.model,
                messages=conversation,
                tools=cast(Iterable[ChatCompletionToolParam], tools),
                tool_choice="auto",
                stream=True,
            )
            text_parts: list[str] = []
            pending: dict[int, dict[str, str]] = {}
            async for chunk in stream:
                if not chunk.choices:
                    continue
                delta = chunk.choices[0].delta
                if delta.content:
                    text_parts.append(delta.content)
                    yield sse_event("text", {"delta": delta.content})
                for tc in delta.tool_calls or []:
                    slot = pending.setdefault(
                        tc.index, {"id": "", "name": "", "arguments": ""}
                    )
                    if tc.id:
                        slot["id"] = tc.id
                    if tc.function is not None:
                        if tc.function.name:
                            slot["name"] += tc.function.name
                        if tc.function.arguments:
                            slot["arguments"] += tc.function.arguments

            if not pending:
                yield sse_event("final", {"text": "".join(text_parts).strip()})
                return

            calls = [pending[i] for i in sorted(pending)]
            async for frame in self._run_tool_calls(calls, conversation):
                yield frame

        raise LLMError("Maximum tool steps reached without a final answer")

    @override
    async def stream_chat(
        self,
        messages: list[dict[str, Any]],
        system_message: Optional[str] = None,
    ) -> AsyncIterator[str]:
        """
        Stream one assistant turn, running requested tools between rounds.

        Emits events:
        - event: text  data: {delta}
        - event: step  data: {phase,name,arguments|result|error}
        - event: final data: {text}
        - event: error data: {error}
        - event: done  data: {}
        """
        try:
            conversation = self._prepare_messages(messages, system_message)
            async for frame in self._run_turn(conversation):
                yield frame
        except Exception as e:
            self._logger.error(f"Chat stream failed: {e}")
            yield sse_event("error", {"error": str(e) or "Chat stream failed"})
        yield sse_event("done", {})
