import re
from typing import Optional

FENCED_CODE_PATTERN = re.compile(r"```[\s\S]*?```")
INLINE_CODE_PATTERN = re.compile(r"`[^`]+`")
IMAGE_PATTERN = re.compile(r"!\[.*?\]\(.*?\)")
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\([^)]+\)")
HEADING_PATTERN = re.compile(r"^#{1,6}\s+", re.MULTILINE)
EMPHASIS_PATTERN = re.compile(r"[*_]{1,3}([^*_]+)[*_]{1,3}")
BLOCKQUOTE_PATTERN = re.compile(r"^>\s+", re.MULTILINE)
HORIZONTAL_RULE_PATTERN = re.compile(r"^[-*_]{3,}\s*$", re.MULTILINE)
BULLET_ITEM_PATTERN = re.compile(r"^\s*[-*+]\s+", re.MULTILINE)
NUMBERED_ITEM_PATTERN = re.compile(r"^\s*\d+\.\s+", re.MULTILINE)
WHITESPACE_PATTERN = re.compile(r"\s+")


def _strip_once(text: str) -> str:
    text = FENCED_CODE_PATTERN.sub("", text)
    text = INLINE_CODE_PATTERN.sub("", text)
    text = IMAGE_PATTERN.sub("", text)
    text = LINK_PATTERN.sub(r"\1", text)
    text = HEADING_PATTERN.sub("", text)
    text = EMPHASIS_PATTERN.sub(r"\1", text)
    text = BLOCKQUOTE_PATTERN.sub("", text)
    text = HORIZONTAL_RULE_PATTERN.sub("", text)
    text = BULLET_ITEM_PATTERN.sub("", text)
    text = NUMBERED_ITEM_PATTERN.sub("", text)
    text = WHITESPACE_PATTERN.sub(" ", text)
    return text.strip()


def normalize(text: Optional[str]) -> str:
    """
    Убирает markdown-разметку из текста перед индексацией.

    Проход повторяется до неподвижной точки, так что normalize идемпотентна.
    Ни одна подстановка не удлиняет текст, поэтому цикл конечен.
    """
    current = text or ""
    while True:
        stripped = _strip_once(current)
        if stripped == current:
            return stripped
        current = stripped
