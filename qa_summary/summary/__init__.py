"""Extractive summarization, rendering and guardrails."""

from .guardrails import calculate_confidence, run_guardrails
from .orchestrator import run_orchestration
from .rendering import render_summary

__all__ = ["calculate_confidence", "render_summary", "run_guardrails", "run_orchestration"]
