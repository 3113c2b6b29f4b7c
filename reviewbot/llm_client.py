#!/usr/bin/env python3

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import openai
from openai import AzureOpenAI, OpenAI

from reviewbot.config import ReviewConfig
from reviewbot.errors import LLMClientError
from reviewbot.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelCapabilities:
    supports_structured_output: bool = False


# Models known to honour response_format={"type": "json_object"}
MODEL_CAPABILITIES: Dict[str, ModelCapabilities] = {
    "gpt-4-1106-preview": ModelCapabilities(supports_structured_output=True),
    "gpt-4o": ModelCapabilities(supports_structured_output=True),
    "gpt-4o-mini": ModelCapabilities(supports_structured_output=True),
    "gpt-4-turbo": ModelCapabilities(supports_structured_output=True),
    "gpt-4.1-2025-04-14": ModelCapabilities(supports_structured_output=True),
    "gpt-4-0125-preview": ModelCapabilities(supports_structured_output=True),
    "gpt-4-turbo-preview": ModelCapabilities(supports_structured_output=True),
}


def capabilities_for(model: str) -> ModelCapabilities:
    return MODEL_CAPABILITIES.get(model, ModelCapabilities())


class LLMClient:
    """Thin wrapper around the OpenAI chat completions API."""

    def __init__(self, config: ReviewConfig, client: Optional[Any] = None):
        """
        Initialize the model client.

        Args:
            config: Run configuration
            client: Pre-built OpenAI client, mainly for tests
        """
        self.config = config
        self.model = config.model
        if client is not None:
            self.client = client
        elif config.use_azure:
            self.client = AzureOpenAI(
                azure_endpoint=config.azure_openai_endpoint,
                api_key=config.azure_openai_key,
                api_version=config.azure_openai_api_version,
            )
        else:
            self.client = OpenAI(api_key=config.openai_api_key)

    def _request_options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "model": self.model,
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
            "top_p": 1,
            "frequency_penalty": 0,
            "presence_penalty": 0,
            "timeout": self.config.request_timeout,
        }
        # Return JSON if the model supports it
        if capabilities_for(self.model).supports_structured_output:
            options["response_format"] = {"type": "json_object"}
        return options

    def complete(self, prompt: str) -> str:
        """
        Sends a prompt to the model and returns the raw reply text.

        Args:
            prompt: Prompt to send as the user message

        Returns:
            Reply text, stripped

        Raises:
            LLMClientError: if the call fails, times out or returns no choices
        """
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        logger.debug(f"Sending request to {self.model} ({len(prompt)} chars)")
        try:
            response = self.client.chat.completions.create(messages=messages, **self._request_options())
        except openai.OpenAIError as e:
            raise LLMClientError(f"Model call failed: {e}") from e

        if not response.choices:
            raise LLMClientError("Model returned no choices")

        content = response.choices[0].message.content
        return (content or "").strip()
