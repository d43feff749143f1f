"""Exception hierarchy for agent-toolbox."""

from __future__ import annotations


class AgentToolboxError(Exception):
    """Base class for errors raised by agent-toolbox."""


class SocrataError(AgentToolboxError):
    """The SF 311 open data API rejected or failed a query."""


class QueryTimeoutError(SocrataError):
    """A SoQL query exceeded the request timeout."""

    def __init__(self) -> None:
        super().__init__(
            "Query timed out. The dataset is too large. Please refine your query: "
            "1. Remove leading wildcards (e.g. use 'Text%' instead of '%Text%'). "
            "2. Reduce the date range. 3. Limit columns."
        )


class ToolNotFoundError(AgentToolboxError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolValidationError(AgentToolboxError):
    """Tool input or output did not match its schema."""
