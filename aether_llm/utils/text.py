"""Текстовые утилиты."""

import re

SENTENCE_PATTERN = re.compile(r"[^.!?。！？\n]+[.!?。！？\n]*|[^.!?。！？\n]+$")


def split_into_sentences(text: str) -> list[str]:
    """Разбить текст на предложения по знакам конца предложения (EN и ZH) и переводам строк.

    Используется как fallback, когда LLM сегментация недоступна.

    Args:
        text: Исходный текст

    Returns:
        Предложения без крайних пробелов; [text] если ничего не найдено
    """
    if not text:
        return []

    matches = SENTENCE_PATTERN.findall(text)
    if not matches:
        return [text]

    return [sentence for sentence in (match.strip() for match in matches) if sentence]
