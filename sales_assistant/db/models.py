from dataclasses import dataclass


@dataclass(frozen=True)
class DocumentChunk:
    content: str


@dataclass(frozen=True)
class ConversationMessage:
    role: str  # "user" | "assistant" | "system"
    content: str

    def to_prompt(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}
