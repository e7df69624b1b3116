"""OpenAI-compatible chat completions client with tool calling."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrition_relay.services.nutrition import ToolCallClient, ToolCallOutcome


@dataclass
class OpenAIChatClient(ToolCallClient):
    """Tool-calling client backed by an OpenAI-compatible endpoint.

    The SDK client is built on first use so missing credentials only fail
    the request that needs them.
    """

    api_key: str | None = None
    base_url: str | None = None
    client: AsyncOpenAI | None = None

    @classmethod
    def create(cls, api_key: str | None, base_url: str | None) -> "OpenAIChatClient":
        """Create a chat client for the configured endpoint."""
        return cls(api_key=api_key, base_url=base_url)

    def _get_client(self) -> AsyncOpenAI:
        if self.client is None:
            self.client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self.client

    async def call_tool(
        self,
        *,
        model: str,
        max_tokens: int,
        prompt: str,
        image_url: str,
        tool: dict[str, object],
    ) -> ToolCallOutcome:
        """Call chat completions with a single declared tool."""
        messages = [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": image_url}},
                ],
            }
        ]
        response = await self._get_client().chat.completions.create(
            model=model,
            max_tokens=max_tokens,
            tools=[tool],
            messages=messages,
        )
        raw_response = response.model_dump_json()
        tool_calls = None
        if response.choices:
            tool_calls = response.choices[0].message.tool_calls
        if not tool_calls:
            return ToolCallOutcome(
                tool_name=None, arguments=None, raw_response=raw_response
            )
        function = tool_calls[0].function
        return ToolCallOutcome(
            tool_name=function.name,
            arguments=function.arguments,
            raw_response=raw_response,
        )

    async def close(self) -> None:
        """Close the SDK client if it was opened."""
        if self.client is not None:
            await self.client.close()
