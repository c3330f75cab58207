"""Промпты для каждого типа задачи."""

from datetime import datetime
from typing import Any

from aether_llm.core.constants import (
    DEFAULT_CUSTOM_SYSTEM_PROMPT,
    DEFAULT_GREETING_COUNT,
    MAX_GREETING_COUNT,
)
from aether_llm.core.enums import Language, TaskType
from aether_llm.prompts.base import (
    TaskPrompt,
    as_object,
    param_str,
    string_list,
    string_value,
    time_of_day,
)

JSON_ONLY = "Important: Only return valid JSON, no additional text."


class SegmentPrompt(TaskPrompt):
    """Разбиение текста одного языка на предложения."""

    task_type = TaskType.SEGMENT

    def system_prompt(self, params: dict[str, Any]) -> str:
        language = "English" if params.get("language") == Language.EN.value else "Chinese"
        return (
            "You are a precise text segmentation assistant. "
            f"Split the following {language} text into individual sentences.\n"
            "\n"
            "Rules:\n"
            "1. Keep abbreviations intact (Mr., Dr., U.S., etc.)\n"
            "2. Keep decimal numbers intact (3.14, 2.0, etc.)\n"
            "3. Keep quoted speech as single units when appropriate\n"
            "4. Preserve the original text exactly - do not translate or modify\n"
            '5. Return a JSON object: { "segments": ["sentence1", "sentence2", ...] }\n'
            "\n"
            f"{JSON_ONLY}"
        )

    def user_message(self, params: dict[str, Any]) -> str:
        return param_str(params, "text")

    def parse_response(self, raw: Any) -> dict[str, Any]:
        return {"segments": string_list(as_object(raw).get("segments"))}


class SegmentAlignPrompt(TaskPrompt):
    """Выравнивание параллельных EN/ZH текстов в пары предложений."""

    task_type = TaskType.SEGMENT_ALIGN

    def system_prompt(self, params: dict[str, Any]) -> str:
        return (
            "You are a bilingual text alignment assistant. Given parallel English and Chinese texts, "
            "split them into semantically aligned sentence pairs.\n"
            "\n"
            "Rules:\n"
            "1. Each pair should contain semantically equivalent content\n"
            "2. Handle 1:N and N:1 mappings (one sentence in one language may correspond "
            "to multiple in the other)\n"
            "3. Preserve original text exactly - do not modify or correct\n"
            '4. Return JSON: { "pairs": [{ "en": "...", "zh": "..." }, ...] }\n'
            "\n"
            "If alignment is ambiguous, prefer keeping related content together rather than splitting.\n"
            f"{JSON_ONLY}"
        )

    def user_message(self, params: dict[str, Any]) -> str:
        en_text = param_str(params, "enText")
        zh_text = param_str(params, "zhText")
        return f"English text:\n{en_text}\n\nChinese text:\n{zh_text}"

    def parse_response(self, raw: Any) -> dict[str, Any]:
        pairs = as_object(raw).get("pairs")
        if not isinstance(pairs, list):
            return {"pairs": []}

        return {
            "pairs": [
                {"en": string_value(pair.get("en")), "zh": string_value(pair.get("zh"))}
                for pair in pairs
                if isinstance(pair, dict)
            ]
        }


class TranslatePrompt(TaskPrompt):
    """Перевод текста."""

    task_type = TaskType.TRANSLATE

    def system_prompt(self, params: dict[str, Any]) -> str:
        source = param_str(params, "from", "English")
        target = param_str(params, "to", "Chinese")
        return (
            f"You are a professional translator. Translate the following text from {source} to {target}.\n"
            "Maintain the original meaning, tone, and style.\n"
            'Return JSON: { "translation": "..." }\n'
            "\n"
            f"{JSON_ONLY}"
        )

    def user_message(self, params: dict[str, Any]) -> str:
        return param_str(params, "text")

    def parse_response(self, raw: Any) -> dict[str, Any]:
        return {"translation": string_value(as_object(raw).get("translation"))}


class ScorePrompt(TaskPrompt):
    """Оценка перевода пользователя относительно эталона."""

    task_type = TaskType.SCORE

    def system_prompt(self, params: dict[str, Any]) -> str:
        return (
            "You are a translation quality assessor. "
            "Compare the user's translation with the reference and provide:\n"
            "1. A score from 0-100\n"
            "2. Specific feedback on accuracy, fluency, and style\n"
            "3. Suggested improvements\n"
            "\n"
            'Return JSON: { "score": number, "feedback": "...", "suggestions": ["..."] }\n'
            "\n"
            f"{JSON_ONLY}"
        )

    def user_message(self, params: dict[str, Any]) -> str:
        return (
            f"Original: {param_str(params, 'original')}\n"
            f"Reference: {param_str(params, 'reference')}\n"
            f"User's translation: {param_str(params, 'userTranslation')}"
        )

    def parse_response(self, raw: Any) -> dict[str, Any]:
        data = as_object(raw)
        score = data.get("score")
        if isinstance(score, bool) or not isinstance(score, int | float):
            score = 0

        return {
            "score": score,
            "feedback": string_value(data.get("feedback")),
            "suggestions": string_list(data.get("suggestions")),
        }


class GreetingPrompt(TaskPrompt):
    """Персональные приветствия для стартового экрана.

    Параметры: ``userName``, ``customPrompt``, ``count`` (1-20, по умолчанию 5),
    ``hour`` (0-23, по умолчанию текущий локальный час).
    """

    task_type = TaskType.GREETING

    def system_prompt(self, params: dict[str, Any]) -> str:
        count = greeting_count(params.get("count"))
        prompt = (
            "You are a friendly companion in a translation practice app. "
            f"Generate {count} short greetings for the user.\n"
            "\n"
            "Rules:\n"
            "1. Each greeting is written entirely in English or entirely in Chinese, "
            "never mixing languages within one greeting\n"
            "2. Mix English and Chinese greetings across the list\n"
            "3. Personalize with the user's name when it is set and match the time of day\n"
            "4. Keep each greeting warm, motivational and under 30 words\n"
            '5. Return JSON: { "greetings": ["...", "..."] }\n'
        )

        custom_prompt = param_str(params, "customPrompt").strip()
        if custom_prompt:
            prompt += f"\nAdditional style guidance from the user:\n{custom_prompt}\n"

        return f"{prompt}\n{JSON_ONLY}"

    def user_message(self, params: dict[str, Any]) -> str:
        user_name = param_str(params, "userName", "not set")
        bucket = time_of_day(greeting_hour(params.get("hour")))
        count = greeting_count(params.get("count"))
        return f"Name: {user_name}\nTime of day: {bucket.value}\nNumber of greetings: {count}"

    def parse_response(self, raw: Any) -> dict[str, Any]:
        return {"greetings": string_list(as_object(raw).get("greetings"))}


class CustomPrompt(TaskPrompt):
    """Промпты задаёт вызывающая сторона, ответ возвращается как есть."""

    task_type = TaskType.CUSTOM

    def system_prompt(self, params: dict[str, Any]) -> str:
        return param_str(params, "systemPrompt", DEFAULT_CUSTOM_SYSTEM_PROMPT)

    def user_message(self, params: dict[str, Any]) -> str:
        return param_str(params, "userMessage")

    def parse_response(self, raw: Any) -> Any:
        return raw


def greeting_count(value: Any) -> int:
    """Количество приветствий, ограниченное диапазоном 1..MAX_GREETING_COUNT."""
    if value is None or isinstance(value, bool):
        return DEFAULT_GREETING_COUNT
    try:
        count = int(value)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_GREETING_COUNT
    return max(1, min(count, MAX_GREETING_COUNT))


def greeting_hour(value: Any) -> int:
    """Час для выбора времени суток.

    Raises:
        ValueError: Если час не целое число 0-23
    """
    if value is None:
        return datetime.now().hour

    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"hour must be an integer, got {value!r}"
        raise ValueError(msg)
    if not 0 <= value <= 23:
        msg = f"hour must be between 0 and 23, got {value}"
        raise ValueError(msg)
    return value
