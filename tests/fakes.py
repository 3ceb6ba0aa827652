"""Test doubles for the HTTP transport and the clock."""
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

Reply = Union[tuple, Exception]


def success_body(provider: str, text: str) -> Dict[str, Any]:
    """A successful response body in the provider's own wire format."""
    if provider == "openai":
        return {"choices": [{"message": {"content": text}}]}
    if provider == "anthropic":
        return {"content": [{"type": "text", "text": text}]}
    if provider == "google":
        return {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    raise ValueError(provider)


def error_body(message: str) -> Dict[str, Any]:
    return {"error": {"message": message}}


@dataclass
class RecordedCall:
    provider: str
    url: str
    headers: Dict[str, str]
    body: Dict[str, Any]

    @property
    def prompt(self) -> str:
        if "contents" in self.body:
            return self.body["contents"][0]["parts"][0]["text"]
        return self.body["messages"][0]["content"]


@dataclass
class FakeTransport:
    """Records every POST and replays scripted replies per provider.

    Replies are consumed in order; the last one repeats. A provider with no
    script answers HTTP 500.
    """

    scripts: Dict[str, List[Reply]] = field(default_factory=dict)
    calls: List[RecordedCall] = field(default_factory=list)
    closed: bool = False

    def script(self, provider: str, *replies: Reply) -> "FakeTransport":
        self.scripts.setdefault(provider, []).extend(replies)
        return self

    def reply_text(self, provider: str, *texts: str) -> "FakeTransport":
        return self.script(provider, *[(200, success_body(provider, text)) for text in texts])

    def reply_json(self, provider: str, *payloads: Any) -> "FakeTransport":
        return self.reply_text(provider, *[json.dumps(payload) for payload in payloads])

    def fail(self, provider: str, status: int = 500, message: str = "upstream unavailable") -> "FakeTransport":
        return self.script(provider, (status, error_body(message)))

    def providers_called(self) -> List[str]:
        return [call.provider for call in self.calls]

    async def post(self, provider, url, headers, body):
        self.calls.append(RecordedCall(provider, url, dict(headers), body))
        replies = self.scripts.get(provider)
        if not replies:
            return 500, error_body("no scripted reply")
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def close(self):
        self.closed = True


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
