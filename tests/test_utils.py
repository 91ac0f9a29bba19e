from __future__ import annotations

import json
from unittest.mock import Mock


def make_openai_client_with_content(content: str | None) -> Mock:
    """Mock OpenAI client whose chat.completions.create() answers with content."""
    mock_client = Mock()

    mock_completion = Mock()
    mock_completion.choices = [Mock()]
    mock_completion.choices[0].message.content = content

    mock_client.chat.completions.create.return_value = mock_completion
    return mock_client


def make_openai_client_with_json(payload: object, *, fenced: bool = False) -> Mock:
    content = json.dumps(payload, ensure_ascii=False)
    if fenced:
        content = f"```json\n{content}\n```"
    return make_openai_client_with_content(content)


def make_openai_client_with_error(error: Exception) -> Mock:
    mock_client = Mock()
    mock_client.chat.completions.create.side_effect = error
    return mock_client


def make_redis_mock() -> Mock:
    """Redis client mock backed by plain dicts (get/set/rpush/lrange only)."""
    values: dict[str, str] = {}
    lists: dict[str, list[str]] = {}

    client = Mock()
    client.get.side_effect = lambda key: values.get(key)
    client.set.side_effect = lambda key, value: values.__setitem__(key, value)
    client.rpush.side_effect = lambda key, value: lists.setdefault(key, []).append(value)
    client.lrange.side_effect = lambda key, start, end: list(lists.get(key, []))
    client.values = values
    client.lists = lists
    return client
