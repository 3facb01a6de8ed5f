"""unillm: one request/response contract over several LLM providers.

Public API:
    - generate(): Text for a prompt, provider inferred from the model name
    - generate_structured(): Parsed JSON for a prompt and a schema
    - LLM / create_llm(): Dispatcher holding a resolved configuration
    - detect_provider(): Model identifier to provider
"""

from __future__ import annotations

import logging

from unillm.config import LLMConfig
from unillm.detect import detect_provider
from unillm.errors import (
    APIKeyError,
    ConfigurationError,
    LLMError,
    LLMTimeoutError,
    UnsupportedProviderError,
)
from unillm.llm import LLM, create_llm, generate, generate_structured
from unillm.providers import get_adapter, register_adapter, unregister_adapter
from unillm.providers.openai import OpenAIAdapter
from unillm.types import (
    ContentPart,
    FileDataPart,
    FileIdPart,
    FileURLPart,
    ImagePart,
    LLMResponse,
    Message,
    Prompt,
    Provider,
    ReasoningLevel,
    TextPart,
    Usage,
)

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("unillm")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("unillm").addHandler(logging.NullHandler())

__all__ = [
    "LLM",
    "APIKeyError",
    "ConfigurationError",
    "ContentPart",
    "FileDataPart",
    "FileIdPart",
    "FileURLPart",
    "ImagePart",
    "LLMConfig",
    "LLMError",
    "LLMResponse",
    "LLMTimeoutError",
    "Message",
    "OpenAIAdapter",
    "Prompt",
    "Provider",
    "ReasoningLevel",
    "TextPart",
    "UnsupportedProviderError",
    "Usage",
    "create_llm",
    "detect_provider",
    "generate",
    "generate_structured",
    "get_adapter",
    "register_adapter",
    "unregister_adapter",
]
