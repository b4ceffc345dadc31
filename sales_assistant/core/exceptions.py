class RAGBaseError(Exception):
    """Base exception for the assistant."""

    def __init__(self, message: str = "An internal error occurred."):
        self.message = message
        super().__init__(self.message)


class ConfigurationError(RAGBaseError):
    """Required external service configuration is missing."""

    def __init__(self, message: str = "Missing environment variables."):
        super().__init__(message)


class AuthorizationError(RAGBaseError):
    """Bearer credential missing or rejected."""

    def __init__(self, message: str = "No authorization header passed"):
        super().__init__(message)


class RetrievalError(RAGBaseError):
    """The vector store similarity search failed."""

    def __init__(
        self,
        message: str = "There was an error reading your documents, please try again.",
    ):
        super().__init__(message)


class GenerationError(RAGBaseError):
    """The language model failed to generate a response."""

    def __init__(
        self,
        message: str = "There was an error generating a response, please try again.",
    ):
        super().__init__(message)


class EmbeddingError(RAGBaseError):
    """Failed to compute an embedding for an outgoing message."""

    def __init__(self, message: str = "Unable to generate embeddings."):
        super().__init__(message)


class LLMProviderNotFoundError(RAGBaseError):
    """Requested LLM provider is not available."""

    def __init__(self, provider: str):
        super().__init__(f"LLM provider '{provider}' is not supported.")
