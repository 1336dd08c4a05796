from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Orchestrator-workers: one call plans subtasks, one worker call per subtask.
"""

import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Mapping

from pydantic import BaseModel, Field

from ..chat.template import PromptTemplate
from .errors import WorkflowError
from .parallel import bounded_gather

if TYPE_CHECKING:
    from ..chat.client import ChatClient

logger = logging.getLogger(__name__)

DEFAULT_ORCHESTRATOR_PROMPT = """Analyze this task and break it down into 2-3 distinct approaches:

Task: {task}

Return your response in this JSON format:
{{
  "analysis": "Explain your understanding of the task and which variations would be valuable. Focus on how each approach serves different aspects of the task.",
  "tasks": [
    {{
      "type": "formal",
      "description": "Write a precise, technical version that emphasizes specifications"
    }},
    {{
      "type": "conversational",
      "description": "Write an engaging, friendly version that connects with readers"
    }}
  ]
}}"""

DEFAULT_WORKER_PROMPT = """Generate content based on:
Task: {original_task}
Style: {task_type}
Guidelines: {task_description}"""


class Task(BaseModel):
    type: str = Field(description="Short label for the approach.")
    description: str = Field(description="What the worker should produce.")


class OrchestratorResponse(BaseModel):
    analysis: str
    tasks: list[Task]


class FinalResponse(BaseModel):
    analysis: str
    worker_responses: list[str]


class Orchestrator:
    """
    Breaks a task into subtasks and runs a worker prompt for each.

    `orchestrator_prompt` must use `{task}`. `worker_prompt` must use
    `{original_task}`, `{task_type}` and `{task_description}`. Extra
    placeholders are filled from the `context` passed to `process`.
    """

    def __init__(
        self,
        client: "ChatClient",
        *,
        orchestrator_prompt: str = DEFAULT_ORCHESTRATOR_PROMPT,
        worker_prompt: str = DEFAULT_WORKER_PROMPT,
        n_workers: int = 3,
    ) -> None:
        if n_workers < 1:
            raise ValueError("n_workers must be at least 1")
        self.client = client
        self.orchestrator_prompt = PromptTemplate(orchestrator_prompt)
        self.worker_prompt = PromptTemplate(worker_prompt)
        _require(self.orchestrator_prompt, {"task"}, "orchestrator_prompt")
        _require(
            self.worker_prompt,
            {"original_task", "task_type", "task_description"},
            "worker_prompt",
        )
        self.n_workers = n_workers

    async def plan(
        self, task: str, context: Mapping[str, Any] | None = None
    ) -> OrchestratorResponse:
        if not task or not task.strip():
            raise ValueError("task must be a non-empty string")
        prompt = self.orchestrator_prompt.render(**{**(context or {}), "task": task})
        plan = await self.client.ask_for(prompt, OrchestratorResponse)
        if not plan.tasks:
            raise WorkflowError("Orchestrator returned no subtasks")
        logger.debug("orchestrator planned %d subtasks: %s", len(plan.tasks), plan.analysis)
        return plan

    async def process(
        self, task: str, context: Mapping[str, Any] | None = None
    ) -> FinalResponse:
        plan = await self.plan(task, context)

        def _worker(subtask: Task) -> Callable[[], Awaitable[str]]:
            async def _run() -> str:
                prompt = self.worker_prompt.render(
                    **{
                        **(context or {}),
                        "original_task": task,
                        "task_type": subtask.type,
                        "task_description": subtask.description,
                    }
                )
                result = await self.client.ask(prompt)
                return result.text

            return _run

        responses = await bounded_gather(
            [_worker(subtask) for subtask in plan.tasks], n_workers=self.n_workers
        )
        return FinalResponse(analysis=plan.analysis, worker_responses=responses)


def _require(template: PromptTemplate, names: set[str], label: str) -> None:
    missing = names - set(template.variables)
    if missing:
        raise ValueError(f"{label} is missing placeholders: {sorted(missing)}")
