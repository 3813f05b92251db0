"""
Agent System
============

The agent turns a user message into an answer by running it through a
hosted OpenAI assistant, executing any tools the assistant asks for along
the way.

This module provides:
- MonAIAgent: the agent facade (initialize, send_message)
- RunDriver: drives a single run through its status lifecycle
- ToolExecutor: executes and submits the tool calls a run requires
- AgentSession: state kept between messages
"""

from monai_agent.agent.core import MonAIAgent, MonAIAgentConfig
from monai_agent.agent.run_driver import RunDriver, RunStatus
from monai_agent.agent.session import AgentSession, Resolution, ResolutionOrigin
from monai_agent.agent.tools_executor import ToolCall, ToolCallResult, ToolExecutor

__all__ = [
    "MonAIAgent",
    "MonAIAgentConfig",
    "RunDriver",
    "RunStatus",
    "AgentSession",
    "Resolution",
    "ResolutionOrigin",
    "ToolCall",
    "ToolCallResult",
    "ToolExecutor",
]
