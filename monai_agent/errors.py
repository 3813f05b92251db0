"""
Errors
======

Exception types raised by the SDK.

Failures inside a single tool call never surface as exceptions to the caller
of MonAIAgent.send_message: the tool executor turns them into "Error: ..."
outputs for the assistant to read. Everything else below propagates.

Errors from the OpenAI SDK itself (openai.OpenAIError and subclasses) are
not wrapped and reach the caller unchanged.
"""


class MonAIError(Exception):
    """Base class for all SDK errors."""


class ConfigurationError(MonAIError):
    """Required context is missing, e.g. no wallet address can be resolved."""


class ToolNotFoundError(MonAIError, LookupError):
    """A tool name is not present in the registry."""

    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(
            f"Tool \"{name}\" not found. Available tools: {', '.join(available)}"
        )


class TokenNotFoundError(MonAIError, LookupError):
    """A token name is not present in the token table."""

    def __init__(self, token_name: str, available: list[str]):
        self.token_name = token_name
        self.available = available
        super().__init__(
            f"Token \"{token_name}\" not found. Available tokens: {', '.join(available)}"
        )


class ToolArgumentsError(MonAIError, ValueError):
    """Tool call arguments are malformed or miss a required parameter."""


class ToolExecutionError(MonAIError):
    """A tool handler failed while talking to an external system."""


class RpcError(MonAIError):
    """A JSON-RPC node answered with an error object."""

    def __init__(self, method: str, error: dict):
        self.method = method
        self.code = error.get("code")
        self.rpc_message = error.get("message", "")
        super().__init__(f"RPC {method} failed ({self.code}): {self.rpc_message}")


class RunFailedError(MonAIError):
    """An assistant run ended in a status other than completed."""

    def __init__(self, run_id: str, status: str, reason: str | None = None):
        self.run_id = run_id
        self.status = status
        self.reason = reason
        message = f"Run {run_id} ended with status '{status}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class RunStalledError(MonAIError):
    """A tool dispatch round produced nothing to submit, so the run cannot advance."""


class ResponseFormatError(MonAIError):
    """A completed run's latest message is not assistant-authored text."""


class PollTimeoutError(MonAIError, TimeoutError):
    """A poll loop exceeded its configured maximum wait."""
