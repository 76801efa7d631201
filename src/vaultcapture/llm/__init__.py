from .client import (
    BaseLLMClient,
    GeminiLLMClient,
    OpenAILLMClient,
    create_llm_client,
)
from .types import (
    ImageAttachment,
    LLMCaptureContext,
    LLMCaptureResult,
    LLMClientConfig,
)

__all__ = [
    "BaseLLMClient",
    "GeminiLLMClient",
    "ImageAttachment",
    "LLMCaptureContext",
    "LLMCaptureResult",
    "LLMClientConfig",
    "OpenAILLMClient",
    "create_llm_client",
]
