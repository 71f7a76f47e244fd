"""Shared test doubles.

``make_llm`` builds an in-memory stand-in for the language-model client: each
field's extraction reply is looked up by field name (an ``Exception`` value is
raised instead of returned) and every chat call returns ``chat_reply``.
"""

import json

import pytest

EMPTY_REPLY = '{"value": null, "confidence": 0}'


def field_reply(value, confidence=0.9, **extra) -> str:
    return json.dumps({"value": value, "confidence": confidence, **extra})


class FakeLLM:
    def __init__(self, replies=None, chat_reply="Thanks! Tell me more."):
        self.replies = dict(replies or {})
        self.chat_reply = chat_reply
        self.extract_calls = []
        self.converse_calls = []

    async def extract(self, field_spec, text):
        self.extract_calls.append((field_spec.name, text))
        reply = self.replies.get(field_spec.name, EMPTY_REPLY)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def converse(self, messages):
        self.converse_calls.append(messages)
        if isinstance(self.chat_reply, Exception):
            raise self.chat_reply
        return self.chat_reply


@pytest.fixture
def make_llm():
    return FakeLLM


@pytest.fixture
def reply():
    return field_reply
