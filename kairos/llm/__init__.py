"""Model access and the tool-orchestration loop."""

from kairos.llm.agent import Assistant, RunOptions
from kairos.llm.client import ChatModel, ModelReply, ToolCall
from kairos.llm.errors import AssistantError, ToolRoundLimitError, UpstreamError, classify_error

__all__ = [
    "Assistant",
    "AssistantError",
    "ChatModel",
    "ModelReply",
    "RunOptions",
    "ToolCall",
    "ToolRoundLimitError",
    "UpstreamError",
    "classify_error",
]
