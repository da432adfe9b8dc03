"""Best-effort parser for the sentence/action scripts returned by the chat model.

The model is asked to emit blocks such as::

    "sentence": "Text to narrate"
    "action": "happy"
    END_SENTENCE

followed by a final ``END_SUMMARY``. Compliance is weak, so extraction is
pattern based and degrades to naive sentence splitting instead of failing.
"""

import re
from typing import List, Protocol

from app.models.story import ScriptLine

BLOCK_DELIMITER = "END_SENTENCE"
TERMINAL_DELIMITER = "END_SUMMARY"

_BLOCK_SPLIT_RE = re.compile(rf"{BLOCK_DELIMITER}\s*", re.IGNORECASE)
_SENTENCE_RE = re.compile(r'"sentence"\s*:\s*"([^"]*)"', re.IGNORECASE)
_ACTION_RE = re.compile(r'"action"\s*:\s*"([^"]*)"', re.IGNORECASE)
_SENTENCE_END_RE = re.compile(r"(?<=[.!?])\s+")


class ScriptParser(Protocol):
    """Turns raw model output into ordered script lines. Must never raise."""

    def parse(self, raw: object) -> List[ScriptLine]:
        ...


def split_sentences(text: str) -> List[ScriptLine]:
    """Split plain prose on whitespace following ``.``, ``!`` or ``?``."""
    fragments = (part.strip() for part in _SENTENCE_END_RE.split(text))
    return [ScriptLine(sentence=fragment) for fragment in fragments if fragment]


def parse_structured_script(raw: object) -> List[ScriptLine]:
    """
    Parse a structured script into ordered sentence/action lines.

    Args:
        raw: Model output. Anything that is not a non-empty string yields [].

    Returns:
        Lines in narration order. When no block carries a sentence field the
        text is split on sentence punctuation instead.
    """
    if not raw or not isinstance(raw, str):
        return []

    text = raw.strip()
    end = text.find(TERMINAL_DELIMITER)
    if end != -1:
        text = text[:end]

    blocks = [part.strip() for part in _BLOCK_SPLIT_RE.split(text)]

    lines: List[ScriptLine] = []
    for block in blocks:
        if not block:
            continue
        sentence_match = _SENTENCE_RE.search(block)
        if not sentence_match or not sentence_match.group(1):
            continue
        action_match = _ACTION_RE.search(block)
        lines.append(
            ScriptLine(
                sentence=sentence_match.group(1),
                action=(action_match.group(1) or None) if action_match else None,
            )
        )

    if not lines:
        return split_sentences(text)
    return lines


class RegexScriptParser:
    """Default ScriptParser backed by parse_structured_script."""

    def parse(self, raw: object) -> List[ScriptLine]:
        return parse_structured_script(raw)
