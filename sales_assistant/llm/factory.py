from sales_assistant.core.config import get_settings
from sales_assistant.core.exceptions import LLMProviderNotFoundError
from sales_assistant.llm.base import BaseLLMProvider


def create_llm_provider() -> BaseLLMProvider:
    """Instantiate the configured LLM provider."""
    settings = get_settings()
    provider = settings.llm_provider

    if provider == "openai":
        from sales_assistant.llm.openai_provider import OpenAIProvider
        return OpenAIProvider()

    if provider == "azure":
        from sales_assistant.llm.openai_provider import AzureOpenAIProvider
        return AzureOpenAIProvider()

    raise LLMProviderNotFoundError(provider)
