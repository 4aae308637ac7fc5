"""Data models for the coding assistant orchestrator."""
from .conversation import Turn, ContextPair
from .envelope import TestCase, Solution, PlainAnswer, ResponseEnvelope, envelope_to_payload
from .api import AssistRequest, FieldViolation

__all__ = [
    "Turn",
    "ContextPair",
    "TestCase",
    "Solution",
    "PlainAnswer",
    "ResponseEnvelope",
    "envelope_to_payload",
    "AssistRequest",
    "FieldViolation",
]
