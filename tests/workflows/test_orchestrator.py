from __future__ import annotations

import json

import pytest

from llm_fakes import ScriptedLLM, last_user, run_async
from llmflows.chat.client import ChatClient
from llmflows.workflows.errors import WorkflowError
from llmflows.workflows.orchestrator import FinalResponse, Orchestrator

PLAN = {
    "analysis": "Two audiences need different tones.",
    "tasks": [
        {"type": "formal", "description": "Precise specification"},
        {"type": "friendly", "description": "Casual and warm"},
    ],
}


def _reply(req):
    prompt = last_user(req)
    if prompt.startswith("Analyze this task"):
        return json.dumps(PLAN)
    style = prompt.split("Style: ")[1].split("\n")[0]
    return f"{style} copy"


def test_process_plans_then_runs_one_worker_per_task():
    llm = ScriptedLLM(reply=_reply)
    orchestrator = Orchestrator(ChatClient(llm))

    out = run_async(orchestrator.process("Write a product description for a water bottle"))

    assert out == FinalResponse(
        analysis="Two audiences need different tones.",
        worker_responses=["formal copy", "friendly copy"],
    )
    assert len(llm.requests) == 3
    worker_prompt = llm.requests[1].messages[-1].content
    assert "Task: Write a product description for a water bottle" in worker_prompt
    assert "Guidelines: Precise specification" in worker_prompt


def test_context_fills_extra_placeholders():
    llm = ScriptedLLM(reply=_reply)
    orchestrator = Orchestrator(
        ChatClient(llm),
        worker_prompt=(
            "Audience: {audience}\nTask: {original_task}\n"
            "Style: {task_type}\nGuidelines: {task_description}"
        ),
    )

    run_async(orchestrator.process("Write it", context={"audience": "hikers"}))

    assert llm.requests[1].messages[-1].content.startswith("Audience: hikers")


def test_empty_plan_is_an_error():
    llm = ScriptedLLM([json.dumps({"analysis": "nothing to do", "tasks": []})])

    with pytest.raises(WorkflowError, match="no subtasks"):
        run_async(Orchestrator(ChatClient(llm)).process("task"))


def test_prompts_must_have_required_placeholders():
    client = ChatClient(ScriptedLLM())

    with pytest.raises(ValueError, match="orchestrator_prompt"):
        Orchestrator(client, orchestrator_prompt="Plan something")
    with pytest.raises(ValueError, match="task_description"):
        Orchestrator(client, worker_prompt="{original_task} {task_type}")
    with pytest.raises(ValueError):
        Orchestrator(client, n_workers=0)


def test_blank_task_is_rejected():
    with pytest.raises(ValueError):
        run_async(Orchestrator(ChatClient(ScriptedLLM())).process("  "))
