from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

Prompt fragments and parsing for pydantic-typed model answers.
"""
import json
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from .errors import LLMInvalidResponseError
from .utils import extract_json_object, safe_json_loads

T = TypeVar("T", bound=BaseModel)


def _schema_json(schema: type[BaseModel]) -> str:
    return json.dumps(schema.model_json_schema(), indent=2, ensure_ascii=True)


def parse_and_validate_json(text: str, schema: type[T]) -> T:
    json_str = extract_json_object(text) or text.strip()
    obj = safe_json_loads(json_str)
    if obj is None:
        raise LLMInvalidResponseError(
            f"Failed to extract valid JSON object from response: {text}"
        )
    try:
        return schema.model_validate(obj)
    except ValidationError as e:
        raise LLMInvalidResponseError(
            f"JSON does not conform to schema: {e}\nOriginal response: {text}"
        ) from e


def make_repair_prompt(invalid_response: str, schema: type[T]) -> str:
    return (
        "Your previous answer could not be validated against the schema below. "
        "Reply again with only the corrected JSON object.\n"
        f"{_schema_json(schema)}\n"
        "Previous answer:\n"
        f"{invalid_response}"
    )
