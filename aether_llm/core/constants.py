"""Константы для Aether LLM.

Централизованное хранилище всех магических чисел и строк.
"""

# === HTTP и API ===
API_PREFIX = "/api/llm"
APP_VERSION = "1.0.0"
SERVICE_NAME = "aether_llm"

# === Chat Completions ===
CHAT_COMPLETIONS_PATH = "/chat/completions"
MODELS_PATH = "/models"
JSON_RESPONSE_FORMAT = {"type": "json_object"}

# Сколько символов сырого ответа попадает в сообщение об ошибке парсинга
RESPONSE_SNIPPET_LENGTH = 200

# === Model Discovery ===
# Подстроки id моделей, не поддерживающих text completion
NON_TEXT_MODEL_MARKERS = ("dall-e", "whisper", "tts", "embedding", "moderation")

# === Маскирование ключей ===
API_KEY_MASK_PREFIX = "***"
API_KEY_VISIBLE_CHARS = 4

# === Greeting ===
DEFAULT_GREETING_COUNT = 5
MAX_GREETING_COUNT = 20
DEFAULT_GREETINGS = (
    "Ready to practice some translations?",
    "Every sentence you translate makes you sharper.",
    "今天也来练习几句翻译吧！",
    "Small steps every day add up to fluency.",
    "坚持练习，进步就在眼前。",
)

# === Custom task ===
DEFAULT_CUSTOM_SYSTEM_PROMPT = "You are a helpful assistant. Return your response as valid JSON."
