from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Chat-client advisors. Lower `order` wraps outermost.
"""

from .base import (
    Advisor,
    AdvisorNext,
    AdvisorStreamNext,
    build_call_chain,
    build_stream_chain,
    sort_advisors,
)
from .logging_advisor import LoggingAdvisor
from .memory import ChatMemoryAdvisor
from .question_answer import (
    DEFAULT_QUESTION_ANSWER_TEMPLATE,
    RETRIEVED_DOCUMENTS_KEY,
    QuestionAnswerAdvisor,
)
from .safeguard import DEFAULT_FAILURE_RESPONSE, SafeGuardAdvisor

__all__ = [
    "Advisor",
    "AdvisorNext",
    "AdvisorStreamNext",
    "build_call_chain",
    "build_stream_chain",
    "sort_advisors",
    "LoggingAdvisor",
    "SafeGuardAdvisor",
    "DEFAULT_FAILURE_RESPONSE",
    "ChatMemoryAdvisor",
    "QuestionAnswerAdvisor",
    "DEFAULT_QUESTION_ANSWER_TEMPLATE",
    "RETRIEVED_DOCUMENTS_KEY",
]
