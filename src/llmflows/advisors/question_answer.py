from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Retrieval advisor: augments the user message with similar documents.
"""

from dataclasses import replace

from ..chat.template import PromptTemplate
from ..chat.types import ChatRequest
from ..rag.store.base import VectorStore
from ..rag.types import SearchRequest
from .base import Advisor

DEFAULT_QUESTION_ANSWER_TEMPLATE = """{query}

Context information is below, surrounded by ---------------------

---------------------
{question_answer_context}
---------------------

Given the context and provided history information and not prior knowledge,
reply to the user comment. If the answer is not in the context, inform
the user that you can't answer the question.
"""

RETRIEVED_DOCUMENTS_KEY = "retrieved_documents"


class QuestionAnswerAdvisor(Advisor):
    """
    Searches `vector_store` with the user text and rewrites the user message
    with the hits. The documents used end up in the result context under
    `retrieved_documents`.

    A custom template must use `{query}` and `{question_answer_context}`.
    """

    name = "question_answer"

    def __init__(
        self,
        vector_store: VectorStore,
        *,
        search: SearchRequest | None = None,
        template: str | PromptTemplate = DEFAULT_QUESTION_ANSWER_TEMPLATE,
        order: int = 0,
    ) -> None:
        self.vector_store = vector_store
        self.search = search or SearchRequest()
        self.template = template if isinstance(template, PromptTemplate) else PromptTemplate(template)
        missing = {"query", "question_answer_context"} - set(self.template.variables)
        if missing:
            raise ValueError(
                f"Question-answer template is missing placeholders: {sorted(missing)}"
            )
        self.order = order

    async def before(self, request: ChatRequest) -> ChatRequest:
        documents = await self.vector_store.similarity_search(
            self.search.with_query(request.user)
        )
        request.context[RETRIEVED_DOCUMENTS_KEY] = documents
        augmented = self.template.render(
            query=request.user,
            question_answer_context="\n".join(document.text for document in documents),
        )
        return replace(request, user=augmented)
