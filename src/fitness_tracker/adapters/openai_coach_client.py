"""OpenAI Responses API client for the AI coach."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from fitness_tracker.domain.errors import CoachResponseError
from fitness_tracker.services.coach import CoachClient


@dataclass
class OpenAICoachClient(CoachClient):
    """Coach client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAICoachClient":
        """Create an OpenAI coach client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete_json(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
    ) -> dict[str, object]:
        """Call OpenAI Responses API in JSON mode."""
        response = await self.client.responses.create(
            model=model,
            instructions=system_prompt,
            input=[{"role": "user", "content": user_prompt}],
            text={"format": {"type": "json_object"}},
            temperature=temperature,
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise CoachResponseError("OpenAI returned an empty response")
        try:
            payload = json.loads(output_text)
        except json.JSONDecodeError as exc:
            raise CoachResponseError("OpenAI returned malformed JSON") from exc
        if not isinstance(payload, dict):
            raise CoachResponseError("OpenAI returned a non-object JSON payload")
        return payload

    async def chat(
        self,
        *,
        model: str,
        system_prompt: str,
        messages: list[dict[str, str]],
        temperature: float,
        max_output_tokens: int,
    ) -> str:
        """Call OpenAI Responses API with a conversation."""
        response = await self.client.responses.create(
            model=model,
            instructions=system_prompt,
            input=messages,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            store=False,
        )
        return response.output_text or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
