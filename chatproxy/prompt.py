"""
Prompt assembly for single-text upstreams
"""

from typing import List

from .models import ChatMessage

PROMPT_TEMPLATE = """
System prompt:
{system_prompt}

Search results:
{search_context}

Conversation history:
{history}
"""


def render_history(messages: List[ChatMessage]) -> str:
    """Render non-system turns as 'role: content', blank-line separated"""
    return "\n\n".join(
        f"{msg.role}: {msg.content}" for msg in messages if msg.role != "system"
    )


def assemble_prompt(system_prompt: str, search_context: str, messages: List[ChatMessage]) -> str:
    """Build the upstream prompt from system prompt, search context and history"""
    return PROMPT_TEMPLATE.format(
        system_prompt=system_prompt,
        search_context=search_context,
        history=render_history(messages),
    )
