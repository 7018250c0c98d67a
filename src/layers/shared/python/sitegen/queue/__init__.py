"""Job orchestration for website generation."""

from sitegen.queue.generation_orchestrator import GenerationOrchestrator

__all__ = ["GenerationOrchestrator"]
