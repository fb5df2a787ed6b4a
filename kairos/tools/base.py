"""Base types for the tool-calling framework."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel


@dataclass
class ToolResult:
    """Result of a tool execution.

    Every tool returns one of these. The assistant folds ``to_content()``
    into the follow-up turn it sends back to the model.
    """

    text: str | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_content(self) -> str:
        if self.error:
            return f"Error: {self.error}"
        return self.text or ""


class ToolParams(BaseModel):
    """Base class for tool parameter models.

    Subclass with Field() definitions. The JSON schema is auto-generated
    via model_json_schema() for Claude's tool definitions.
    """


class BaseTool(ABC):
    """Abstract base for class-based tool implementations.

    Use this when a tool needs state (stores, API clients). For simple
    stateless tools, prefer the ``@registry.tool()`` decorator instead.

    Example::

        class MyTool(BaseTool):
            name = "my_tool"
            description = "Does a thing"
            category = "custom"
            params_model = MyToolParams

            async def execute(self, **kwargs) -> ToolResult:
                return ToolResult(text="done")
    """

    name: str = ""
    description: str = ""
    category: str = ""
    params_model: type[ToolParams] | None = None

    @abstractmethod
    async def execute(self, **kwargs: Any) -> ToolResult:
        """Execute the tool with validated parameters."""
        ...
