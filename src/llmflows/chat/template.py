from __future__ import annotations

"""
MIT License
Copyright (c) 2026 socioy
See LICENSE file for full license text.

`{name}`-style prompt templates.
"""

import string
from typing import Any

from .errors import PromptTemplateError

_FORMATTER = string.Formatter()


class PromptTemplate:
    """
    A prompt with `{name}` placeholders.

    Literal braces are written `{{` and `}}`. Placeholders are plain names;
    attribute access, indexing and format specs are rejected up front so a
    template can never reach into the values it is rendered with.
    """

    def __init__(self, template: str) -> None:
        if not isinstance(template, str):
            raise PromptTemplateError("Prompt template must be a string")
        self.template = template
        self._variables = self._parse(template)

    @staticmethod
    def _parse(template: str) -> tuple[str, ...]:
        names: list[str] = []
        try:
            parsed = list(_FORMATTER.parse(template))
        except ValueError as e:
            raise PromptTemplateError(f"Malformed prompt template: {e}") from e

        for _, field_name, format_spec, conversion in parsed:
            if field_name is None:
                continue
            if not field_name.isidentifier():
                raise PromptTemplateError(
                    f"Invalid placeholder '{{{field_name}}}': use plain names only"
                )
            if format_spec or conversion:
                raise PromptTemplateError(
                    f"Placeholder '{{{field_name}}}' must not use format specs or conversions"
                )
            if field_name not in names:
                names.append(field_name)
        return tuple(names)

    @property
    def variables(self) -> tuple[str, ...]:
        return self._variables

    def render(self, **values: Any) -> str:
        missing = [name for name in self._variables if name not in values]
        if missing:
            raise PromptTemplateError(
                f"Missing values for prompt variables: {', '.join(missing)}"
            )
        return self.template.format(**{name: values[name] for name in self._variables})

    def __repr__(self) -> str:
        return f"PromptTemplate(variables={list(self._variables)!r})"
