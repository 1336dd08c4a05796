from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Workflow patterns built on `ChatClient`: chaining, parallelization,
routing, orchestrator-workers and evaluator-optimizer.
"""

from .chain import chain, step_prompt
from .errors import RouteNotFoundError, WorkflowError
from .evaluator import (
    DEFAULT_EVALUATOR_PROMPT,
    DEFAULT_GENERATOR_PROMPT,
    EvaluationResponse,
    EvaluatorOptimizer,
    Generation,
    RefinedResponse,
)
from .orchestrator import (
    DEFAULT_ORCHESTRATOR_PROMPT,
    DEFAULT_WORKER_PROMPT,
    FinalResponse,
    Orchestrator,
    OrchestratorResponse,
    Task,
)
from .parallel import bounded_gather, parallel
from .routing import ROUTER_PROMPT, RouteSelection, determine_route, route

__all__ = [
    "chain",
    "step_prompt",
    "parallel",
    "bounded_gather",
    "determine_route",
    "route",
    "RouteSelection",
    "ROUTER_PROMPT",
    "Orchestrator",
    "OrchestratorResponse",
    "FinalResponse",
    "Task",
    "DEFAULT_ORCHESTRATOR_PROMPT",
    "DEFAULT_WORKER_PROMPT",
    "EvaluatorOptimizer",
    "Generation",
    "EvaluationResponse",
    "RefinedResponse",
    "DEFAULT_GENERATOR_PROMPT",
    "DEFAULT_EVALUATOR_PROMPT",
    "WorkflowError",
    "RouteNotFoundError",
]
