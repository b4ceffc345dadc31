from __future__ import annotations

from collections.abc import Sequence

from sales_assistant.db.models import ConversationMessage
from sales_assistant.rag.prompts import (
    ANSWER_CONTEXT_TEMPLATE,
    ANSWER_SYSTEM_PROMPT,
    SUGGESTION_CONTEXT_TEMPLATE,
    SUGGESTION_SYSTEM_PROMPT,
)


def compose_answer_prompt(
    history: Sequence[ConversationMessage],
    context_text: str,
) -> list[dict[str, str]]:
    """System instruction, then the documents, then every conversation turn in order."""
    messages: list[dict[str, str]] = [
        {"role": "system", "content": ANSWER_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": ANSWER_CONTEXT_TEMPLATE.format(context=context_text),
        },
    ]
    messages.extend(msg.to_prompt() for msg in history)
    return messages


def compose_suggestion_prompt(
    last_message: ConversationMessage,
    context_text: str,
) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SUGGESTION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": SUGGESTION_CONTEXT_TEMPLATE.format(
                last_message=last_message.content,
                context=context_text,
            ),
        },
    ]
