"""
Plain-text extraction from Atlassian Document Format (ADF).

Jira API v3 returns comment bodies as a document tree:

    {"type": "doc", "content": [
        {"type": "paragraph", "content": [{"type": "text", "text": "Hello"}]}
    ]}

Inline nodes (text, mention, emoji, hardBreak) are joined as-is; block nodes
are separated by newlines. Unknown node types are walked for their children,
so new ADF node kinds degrade to their text rather than disappearing.
"""

from collections.abc import Mapping
from typing import Any

# Nodes whose text lives in attrs.text rather than in children
ATTR_TEXT_NODES = frozenset({"mention", "emoji", "status", "date", "inlineCard"})

INLINE_NODES = frozenset({"text", "hardBreak"}) | ATTR_TEXT_NODES


def _node_text(node: Any) -> str:
    if isinstance(node, str):
        return node
    if not isinstance(node, Mapping):
        return ""

    node_type = node.get("type")
    if node_type == "text":
        text = node.get("text")
        return text if isinstance(text, str) else ""
    if node_type == "hardBreak":
        return "\n"
    if node_type in ATTR_TEXT_NODES:
        attrs = node.get("attrs")
        if not isinstance(attrs, Mapping):
            return ""
        text = attrs.get("text") or attrs.get("url")
        return text if isinstance(text, str) else ""

    children = node.get("content")
    if not isinstance(children, list):
        return ""

    parts: list[str] = []
    inline_run: list[str] = []
    for child in children:
        child_type = child.get("type") if isinstance(child, Mapping) else None
        if child_type in INLINE_NODES:
            inline_run.append(_node_text(child))
            continue
        if inline_run:
            parts.append("".join(inline_run))
            inline_run = []
        parts.append(_node_text(child))
    if inline_run:
        parts.append("".join(inline_run))

    return "\n".join(part for part in parts if part)


def extract_text(body: Any) -> str | None:
    """
    Extract readable text from a comment body.

    Args:
        body: An ADF document, or a plain string (API v2 style bodies)

    Returns:
        Stripped text, or None if the body holds no text at all
    """
    if body is None:
        return None
    text = _node_text(body).strip()
    return text or None
