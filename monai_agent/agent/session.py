"""
Session State
=============

Everything an agent remembers between messages:
- Which assistant it talks to and which thread holds the conversation
- Whether that setup has been done
- The wallet context and tool configuration handed to every tool call

Assistant and thread identities start out as whatever the caller supplied
(possibly empty) and are filled in once, during initialization, from a
Resolution: the outcome of "retrieve it if we can, otherwise create it".
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from monai_agent.chain.client import WalletClient


class ResolutionOrigin(str, Enum):
    """How a remote resource was obtained."""
    CREATED = "created"
    RETRIEVED = "retrieved"


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of resolving a remote resource.

    Attributes:
        identity: Remote ID of the resource
        origin: Whether it was created or retrieved
        resource: The object returned by the remote API
    """
    identity: str
    origin: ResolutionOrigin
    resource: Any = None

    @property
    def created(self) -> bool:
        return self.origin is ResolutionOrigin.CREATED


@dataclass
class AgentSession:
    """
    State of one configured agent.

    Attributes:
        wallet: Wallet context shared with every tool call
        instructions: System instructions for a newly created assistant
        tool_env_configs: Passed through unmodified to every tool call
        assistant_id: Assistant to use ("" until resolved)
        thread_id: Conversation thread ("" until resolved)
        assistant: Remote assistant object, once resolved
        thread: Remote thread object, once resolved
        initialized: Set once both identities are resolved; never reset
    """
    wallet: WalletClient
    instructions: str = ""
    tool_env_configs: dict[str, Any] = field(default_factory=dict)
    assistant_id: str = ""
    thread_id: str = ""
    assistant: Any = None
    thread: Any = None
    initialized: bool = False

    def apply_assistant(self, resolution: Resolution) -> None:
        self.assistant_id = resolution.identity
        self.assistant = resolution.resource

    def apply_thread(self, resolution: Resolution) -> None:
        self.thread_id = resolution.identity
        self.thread = resolution.resource

    def mark_initialized(self) -> None:
        """
        Record that setup finished.

        Raises:
            RuntimeError: If either identity is still missing
        """
        if not self.assistant_id or not self.thread_id:
            raise RuntimeError(
                "Cannot mark session initialized without an assistant and a thread"
            )
        self.initialized = True
