from sales_assistant.db.models import ConversationMessage, DocumentChunk
from sales_assistant.rag.composer import compose_answer_prompt, compose_suggestion_prompt
from sales_assistant.rag.context import assemble_context
from sales_assistant.rag.prompts import (
    ANSWER_SYSTEM_PROMPT,
    FALLBACK_REPLY,
    NO_DOCUMENTS,
    SUGGESTION_SYSTEM_PROMPT,
)


def test_no_chunks_yield_sentinel() -> None:
    assert assemble_context([]) == NO_DOCUMENTS


def test_blank_chunks_yield_sentinel() -> None:
    assert assemble_context([DocumentChunk(content="  ")]) == NO_DOCUMENTS


def test_chunks_are_joined_in_retrieval_order() -> None:
    chunks = [DocumentChunk(content="primero"), DocumentChunk(content="segundo")]

    assert assemble_context(chunks) == "primero\n\nsegundo"


def test_answer_prompt_layout() -> None:
    history = [
        ConversationMessage(role="user", content="Hola"),
        ConversationMessage(role="assistant", content="¿En qué te ayudo?"),
        ConversationMessage(role="user", content="¿Qué es el PSD?"),
    ]

    messages = compose_answer_prompt(history, "PSD corrige la acidez del suelo")

    assert messages[0] == {"role": "system", "content": ANSWER_SYSTEM_PROMPT}
    assert messages[1]["role"] == "user"
    assert messages[1]["content"].startswith("Documentos disponibles:")
    assert "PSD corrige la acidez del suelo" in messages[1]["content"]
    assert messages[2:] == [m.to_prompt() for m in history]


def test_answer_instruction_restricts_scope() -> None:
    assert FALLBACK_REPLY in ANSWER_SYSTEM_PROMPT
    assert "Sumagro" in ANSWER_SYSTEM_PROMPT


def test_suggestion_prompt_layout() -> None:
    last = ConversationMessage(role="user", content="¿Qué es el PSD?")

    messages = compose_suggestion_prompt(last, NO_DOCUMENTS)

    assert [m["role"] for m in messages] == ["system", "user"]
    assert messages[0]["content"] == SUGGESTION_SYSTEM_PROMPT
    assert "¿Qué es el PSD?" in messages[1]["content"]
    assert NO_DOCUMENTS in messages[1]["content"]


def test_suggestion_instruction_requests_json_array() -> None:
    assert '["¿Pregunta 1?", "¿Pregunta 2?", "¿Pregunta 3?", "¿Pregunta 4?"]' in (
        SUGGESTION_SYSTEM_PROMPT
    )
    assert "3-4" in SUGGESTION_SYSTEM_PROMPT


def test_context_braces_are_not_formatted() -> None:
    last = ConversationMessage(role="user", content="{pregunta}")

    messages = compose_suggestion_prompt(last, "dosis {kg/ha}")

    assert "{pregunta}" in messages[1]["content"]
    assert "dosis {kg/ha}" in messages[1]["content"]
