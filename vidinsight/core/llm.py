"""
Module for sending prompts to the language model.
"""

import os
from typing import Callable, Optional

from langchain_core.prompts import ChatPromptTemplate
from langchain.chat_models import init_chat_model

from vidinsight.config import config
from vidinsight.core.prompts import SYSTEM_TEMPLATE
from vidinsight.utils.error_handling import as_external_failure
from vidinsight.utils.logger import logging

# A text transform takes a prompt and returns the model's raw text output.
TextTransform = Callable[[str], str]


class LLMTextTransform:
    """Synchronous prompt -> text capability backed by a chat model."""

    def __init__(
        self,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        temperature: float = config.TEMPERATURE,
        max_tokens: int = config.LLM_MAX_TOKENS,
        timeout: float = config.LLM_TIMEOUT_SECONDS,
    ):
        """
        Initialize the text transform with API key and model settings.

        Args:
            model: Chat model name (defaults to the configured model)
            api_key: Groq API key (if None, will try to get from environment)
            temperature: Sampling temperature
            max_tokens: Maximum tokens in a completion
            timeout: Seconds before a call is abandoned
        """
        self.api_key = api_key or os.getenv("GROQ_API_KEY")
        if not self.api_key:
            raise ValueError("Groq API key is required. Set it in .env file or pass directly.")

        self.model = model or config.DEFAULT_LLM_MODEL
        self.llm = init_chat_model(
            model=self.model,
            model_provider=config.MODEL_PROVIDER,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            max_retries=config.LLM_MAX_RETRIES,
            api_key=self.api_key,
        )
        self.prompt = ChatPromptTemplate.from_messages([
            ("system", SYSTEM_TEMPLATE),
            ("human", "{prompt}"),
        ])

    def complete(self, prompt: str) -> str:
        """
        Send a prompt and return the model's text.

        Raises:
            ExternalCallFailure: If the call fails or times out
        """
        messages = self.prompt.format_messages(prompt=prompt)
        logging.debug(f"Sending {len(prompt)} character prompt to {self.model}")
        try:
            response = self.llm.invoke(messages)
        except Exception as e:
            raise as_external_failure(e, "text transform") from e

        content = response.content
        if not isinstance(content, str):
            # Some providers return a list of content blocks
            content = "".join(
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            )
        return content

    __call__ = complete
