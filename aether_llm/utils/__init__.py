"""Утилиты."""

from aether_llm.utils.text import split_into_sentences

__all__ = ["split_into_sentences"]
