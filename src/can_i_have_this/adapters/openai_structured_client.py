"""OpenAI Responses API client for structured outputs."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from can_i_have_this.services.structured_output import StructuredOutputClient


@dataclass
class OpenAIStructuredClient(StructuredOutputClient):
    """Structured output client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIStructuredClient":
        """Create an OpenAI structured output client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        instructions: str | None = None,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with a strict JSON schema."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        request_payload: dict[str, object] = {
            "model": model,
            "input": [{"role": "user", "content": content}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": schema_name,
                    "strict": True,
                    "schema": schema,
                }
            },
            "store": store,
        }
        if instructions:
            request_payload["instructions"] = instructions
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        parsed = json.loads(_strip_code_fences(output_text))
        if not isinstance(parsed, dict):
            raise RuntimeError("OpenAI returned a non-object response")
        return parsed

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fences some models wrap around JSON."""
    return text.replace("```json", "").replace("```", "").strip()
