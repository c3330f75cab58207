"""Services - выполнение LLM задач."""

from aether_llm.services.llm_service import (
    AlignmentResult,
    BilingualSegmentation,
    GreetingResult,
    LLMService,
    SegmentationResult,
    SegmentPair,
)
from aether_llm.services.task_executor import TaskExecutor, strip_markdown_code_fences

__all__ = [
    "AlignmentResult",
    "BilingualSegmentation",
    "GreetingResult",
    "LLMService",
    "SegmentPair",
    "SegmentationResult",
    "TaskExecutor",
    "strip_markdown_code_fences",
]
