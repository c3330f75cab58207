"""Shared модули: ошибки и логирование."""
