from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Evaluator-optimizer: generate, critique, regenerate with the feedback.
"""

import logging
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from ..chat.client import ChatClient

logger = logging.getLogger(__name__)

DEFAULT_GENERATOR_PROMPT = """Your goal is to complete the task based on the input. If there is feedback
from your previous generations, reflect on it to improve your solution.

Return JSON with two fields:
- "thoughts": a brief description of your approach
- "response": the complete solution"""

DEFAULT_EVALUATOR_PROMPT = """Evaluate the following solution for correctness, completeness and quality.
Be strict: only return PASS if every requirement of the task is met.

Return JSON with two fields:
- "evaluation": one of PASS, NEEDS_IMPROVEMENT or FAIL
- "feedback": what is wrong and how to fix it"""

Evaluation = Literal["PASS", "NEEDS_IMPROVEMENT", "FAIL"]


class Generation(BaseModel):
    thoughts: str = Field(description="Brief description of the approach.")
    response: str = Field(description="The complete solution.")


class EvaluationResponse(BaseModel):
    evaluation: Evaluation
    feedback: str = ""


class RefinedResponse(BaseModel):
    solution: str
    chain_of_thought: list[Generation]
    evaluations: list[EvaluationResponse] = Field(default_factory=list)
    iterations: int
    passed: bool


class EvaluatorOptimizer:
    """
    Loops generate -> evaluate until the evaluator says PASS or
    `max_iterations` generations have been made.

    When the cap is hit, the last solution is returned with `passed=False`.
    """

    def __init__(
        self,
        client: "ChatClient",
        *,
        generator_prompt: str = DEFAULT_GENERATOR_PROMPT,
        evaluator_prompt: str = DEFAULT_EVALUATOR_PROMPT,
        max_iterations: int = 5,
    ) -> None:
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.client = client
        self.generator_prompt = generator_prompt
        self.evaluator_prompt = evaluator_prompt
        self.max_iterations = max_iterations

    async def generate(self, task: str, context: str = "") -> Generation:
        parts = [self.generator_prompt]
        if context:
            parts.append(context)
        parts.append(f"Task: {task}")
        return await self.client.ask_for("\n".join(parts), Generation)

    async def evaluate(self, content: str, task: str) -> EvaluationResponse:
        prompt = (
            f"{self.evaluator_prompt}\n"
            f"Original task: {task}\n"
            f"Content to evaluate: {content}"
        )
        return await self.client.ask_for(prompt, EvaluationResponse)

    async def loop(self, task: str) -> RefinedResponse:
        if not task or not task.strip():
            raise ValueError("task must be a non-empty string")

        generations: list[Generation] = []
        evaluations: list[EvaluationResponse] = []
        context = ""
        for iteration in range(1, self.max_iterations + 1):
            generation = await self.generate(task, context)
            generations.append(generation)

            verdict = await self.evaluate(generation.response, task)
            evaluations.append(verdict)
            logger.debug("iteration %d evaluated %s", iteration, verdict.evaluation)

            if verdict.evaluation == "PASS":
                return RefinedResponse(
                    solution=generation.response,
                    chain_of_thought=generations,
                    evaluations=evaluations,
                    iterations=iteration,
                    passed=True,
                )
            context = _feedback_context(generations, verdict.feedback)

        logger.info("no passing solution after %d iterations", self.max_iterations)
        return RefinedResponse(
            solution=generations[-1].response,
            chain_of_thought=generations,
            evaluations=evaluations,
            iterations=self.max_iterations,
            passed=False,
        )


def _feedback_context(generations: list[Generation], feedback: str) -> str:
    lines = ["Previous attempts:"]
    lines.extend(f"- {generation.response}" for generation in generations)
    lines.append(f"Feedback: {feedback}")
    return "\n".join(lines)
