"""Explicit registry of agent-invokable tools.

Each tool pairs a handler with pydantic models for its input and output.
Tools are registered by explicit calls at startup (see ``tools.build_registry``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from .exceptions import ToolNotFoundError, ToolValidationError

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


@dataclass
class Tool:
    name: str
    description: str
    category: str
    input_model: type[BaseModel]
    output_model: type[BaseModel]
    handler: Handler
    tags: list[str] = field(default_factory=list)

    def schema(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": self.tags,
            "input_schema": self.input_model.model_json_schema(by_alias=True),
            "output_schema": self.output_model.model_json_schema(by_alias=True),
        }


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def register(self, tool: Tool) -> Tool:
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        self._tools[tool.name] = tool
        return tool

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def names(self) -> list[str]:
        return list(self._tools)

    def describe(self) -> list[dict[str, Any]]:
        return [tool.schema() for tool in self._tools.values()]

    async def call(self, name: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        """Validate ``payload``, run the handler and validate its result."""
        tool = self.get(name)
        try:
            params = tool.input_model.model_validate(payload or {})
        except ValidationError as exc:
            raise ToolValidationError(f"Invalid input for {name}: {exc}") from exc

        logger.info("Calling tool %s", name)
        result = await tool.handler(params)

        try:
            output = tool.output_model.model_validate(result)
        except ValidationError as exc:
            raise ToolValidationError(f"Invalid output from {name}: {exc}") from exc
        return output.model_dump(mode="json", by_alias=True)
