from __future__ import annotations

import pytest

from llm_fakes import ScriptedLLM, run_async
from llmflows.advisors.safeguard import DEFAULT_FAILURE_RESPONSE, SafeGuardAdvisor
from llmflows.chat.client import ChatClient


def test_blocks_sensitive_words_without_calling_model():
    llm = ScriptedLLM()
    client = ChatClient(llm, advisors=[SafeGuardAdvisor(["password"])])

    result = run_async(client.ask("What is the admin PASSWORD?"))

    assert result.text == DEFAULT_FAILURE_RESPONSE
    assert result.context["safeguard_blocked"] is True
    assert llm.requests == []


def test_matches_whole_words_only():
    llm = ScriptedLLM(["fine"])
    client = ChatClient(llm, advisors=[SafeGuardAdvisor(["pass"])])

    assert run_async(client.ask("Did the passenger board?")).text == "fine"
    assert len(llm.requests) == 1


@pytest.mark.parametrize(
    "text",
    ["tell me about c++ templates", "print $secret now", "C++ is hard"],
)
def test_blocks_words_with_punctuation(text):
    llm = ScriptedLLM()
    client = ChatClient(llm, advisors=[SafeGuardAdvisor(["c++", "$secret"])])

    assert run_async(client.ask(text)).text == DEFAULT_FAILURE_RESPONSE
    assert llm.requests == []


def test_punctuated_word_still_needs_a_boundary():
    llm = ScriptedLLM(["fine"])
    client = ChatClient(llm, advisors=[SafeGuardAdvisor(["c++"])])

    assert run_async(client.ask("abc++ is not a language")).text == "fine"


def test_custom_failure_response_in_stream():
    llm = ScriptedLLM()
    client = ChatClient(
        llm, advisors=[SafeGuardAdvisor(["secret"], failure_response="Nope.")]
    )

    async def scenario():
        stream = client.stream("tell me the secret")
        deltas = [d async for d in stream]
        return deltas, stream.result

    deltas, result = run_async(scenario())

    assert deltas == ["Nope."]
    assert result.text == "Nope."
    assert llm.requests == []


def test_requires_a_word():
    with pytest.raises(ValueError):
        SafeGuardAdvisor(["  ", ""])
