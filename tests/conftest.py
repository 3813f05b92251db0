"""
Shared fixtures: fake OpenAI Assistants objects, a fake JSON-RPC node, and
environment isolation.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from monai_agent.chain.client import PublicClient, WalletAccount, WalletClient
from monai_agent.utils import config as config_module
from monai_agent.utils.config import reset_config
from monai_agent.utils.helpers import clear_token_decimals_cache

WALLET_ADDRESS = "0xABC" + "0" * 36 + "1"

_ENV_VARS = [
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_TEMPERATURE",
    "ASSISTANT_NAME",
    "MONAD_RPC_URL",
    "RPC_TIMEOUT_SECONDS",
    "WALLET_ADDRESS",
    "ASSISTANT_ID",
    "THREAD_ID",
    "AGENT_POLL_INTERVAL",
    "AGENT_MAX_WAIT",
    "LOG_DIR",
]


# =============================================================================
# Environment
# =============================================================================

@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Run every test against a clean environment and fresh caches."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_module, "load_dotenv", lambda *a, **kw: False)
    monkeypatch.setenv("AGENT_POLL_INTERVAL", "0")

    reset_config()
    clear_token_decimals_cache()
    yield
    reset_config()
    clear_token_decimals_cache()


@pytest.fixture
def wallet():
    return WalletClient(account=WalletAccount(address=WALLET_ADDRESS))


# =============================================================================
# OpenAI Assistants fakes
# =============================================================================

def make_tool_call(call_id: str, name: str, arguments: str = "{}"):
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=arguments),
    )


def make_run(run_id: str = "run_1", status: str = "queued", tool_calls=None, last_error=None):
    required_action = None
    if tool_calls is not None:
        required_action = SimpleNamespace(
            type="submit_tool_outputs",
            submit_tool_outputs=SimpleNamespace(tool_calls=tool_calls),
        )
    return SimpleNamespace(
        id=run_id,
        status=status,
        required_action=required_action,
        last_error=last_error,
    )


def make_message(text: str = "", role: str = "assistant", block_type: str = "text"):
    block = SimpleNamespace(type=block_type, text=SimpleNamespace(value=text))
    return SimpleNamespace(role=role, content=[block])


def message_page(*messages):
    return SimpleNamespace(data=list(messages))


@pytest.fixture
def openai_client():
    """
    An AsyncOpenAI stand-in.

    Defaults: assistant retrieval fails, creation returns asst_new; thread
    creation returns thread_new; runs complete immediately with an assistant
    answer "Hello!".
    """
    client = MagicMock()
    beta = client.beta

    beta.assistants.retrieve = AsyncMock(side_effect=Exception("No assistant found"))
    beta.assistants.create = AsyncMock(return_value=SimpleNamespace(id="asst_new"))

    beta.threads.create = AsyncMock(return_value=SimpleNamespace(id="thread_new"))
    beta.threads.retrieve = AsyncMock(side_effect=lambda thread_id: SimpleNamespace(id=thread_id))

    beta.threads.messages.create = AsyncMock(return_value=SimpleNamespace(id="msg_1"))
    beta.threads.messages.list = AsyncMock(return_value=message_page(make_message("Hello!")))

    beta.threads.runs.create = AsyncMock(return_value=make_run(status="completed"))
    beta.threads.runs.retrieve = AsyncMock()
    beta.threads.runs.submit_tool_outputs_and_poll = AsyncMock(
        return_value=make_run(status="completed")
    )

    return client


def submitted_outputs(openai_client, call_index: int = 0) -> dict[str, str]:
    """Map tool_call_id -> output for one submit_tool_outputs_and_poll call."""
    call = openai_client.beta.threads.runs.submit_tool_outputs_and_poll.await_args_list[call_index]
    return {o["tool_call_id"]: o["output"] for o in call.kwargs["tool_outputs"]}


# =============================================================================
# JSON-RPC node fake
# =============================================================================

class FakeNode:
    """
    Answers JSON-RPC requests from canned results.

    Attributes:
        balances: address (lowercase) -> native wei
        token_balances: (token lowercase, owner lowercase) -> raw amount
        decimals: token lowercase -> decimals
        requests: every decoded request payload, in order
    """

    def __init__(self):
        self.balances: dict[str, int] = {}
        self.token_balances: dict[tuple[str, str], int] = {}
        self.decimals: dict[str, int] = {}
        self.fail_with: dict | None = None
        self.requests: list[dict] = []

    def _result(self, method: str, params: list):
        if method == "eth_chainId":
            return hex(10143)
        if method == "eth_getBalance":
            return hex(self.balances.get(params[0].lower(), 0))
        if method == "eth_call":
            call = params[0]
            token = call["to"].lower()
            data = call["data"]
            if data.startswith("0x70a08231"):
                owner = "0x" + data[-40:]
                return "0x" + format(self.token_balances.get((token, owner.lower()), 0), "064x")
            if data == "0x313ce567":
                if token not in self.decimals:
                    return "0x"
                return "0x" + format(self.decimals[token], "064x")
        raise AssertionError(f"Unexpected RPC call {method} {params}")

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)

        if self.fail_with is not None:
            body = {"jsonrpc": "2.0", "id": payload["id"], "error": self.fail_with}
        else:
            body = {
                "jsonrpc": "2.0",
                "id": payload["id"],
                "result": self._result(payload["method"], payload["params"]),
            }
        return httpx.Response(200, json=body)

    def client(self) -> PublicClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return PublicClient("https://rpc.test", http_client=http)


@pytest.fixture
def node(monkeypatch):
    """A FakeNode wired into the token tools' client factory."""
    fake = FakeNode()
    monkeypatch.setattr(
        "monai_agent.tools.token_tools.create_public_client",
        lambda rpc_url=None: fake.client(),
    )
    return fake
