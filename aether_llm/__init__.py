"""Aether LLM - сервис выполнения LLM задач через OpenAI-compatible провайдеры."""
