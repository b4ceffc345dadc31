from __future__ import annotations

import json
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sales_assistant.db.models import ConversationMessage


class MessageSchema(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    role: Literal["user", "assistant", "system"]
    content: str

    def to_message(self) -> ConversationMessage:
        return ConversationMessage(role=self.role, content=self.content)


class ChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    messages: list[MessageSchema] = Field(..., min_length=1)
    embedding: list[Annotated[float, Field(allow_inf_nan=False)]] = Field(..., min_length=1)
    request_suggestions: bool = Field(False, alias="requestSuggestions")

    @field_validator("embedding", mode="before")
    @classmethod
    def decode_embedding(cls, value: Any) -> Any:
        # Browsers send the vector as a JSON-encoded string.
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError as exc:
                raise ValueError("embedding must be a JSON-encoded numeric array") from exc
        return value

    def history(self) -> list[ConversationMessage]:
        return [m.to_message() for m in self.messages]


class SuggestionsResponse(BaseModel):
    suggestions: list[str]


class HealthResponse(BaseModel):
    status: str


class ReadinessResponse(BaseModel):
    status: str
    configuration: str
    vector_store: str
    llm_provider: str


class ErrorResponse(BaseModel):
    error: str
