"""Interface shared by the LLM-backed services."""

from typing import Protocol


class StructuredOutputClient(Protocol):
    """Interface for LLM calls constrained to a JSON schema."""

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
        """Return the model's structured output as a dict."""
