import pytest

from app.core.exceptions import GatewayConfigError
from app.services.llm_client import LLMClient, extract_json, find_json_object


def test_extract_json_plain_object():
    assert extract_json('{"clarity_score": 80}') == {"clarity_score": 80}


def test_extract_json_strips_markdown_fences():
    reply = '```json\n{"communicationScore": 70, "feedback": ["ok"]}\n```'
    assert extract_json(reply)["communicationScore"] == 70


def test_extract_json_ignores_surrounding_prose():
    reply = 'Sure! Here is the analysis:\n{"a": {"b": 1}}\nLet me know if you need more.'
    assert extract_json(reply) == {"a": {"b": 1}}


def test_find_json_object_skips_braces_inside_strings():
    text = 'Result: {"tip": "use {braces} carefully }", "n": 2} trailing }'
    assert find_json_object(text) == '{"tip": "use {braces} carefully }", "n": 2}'


def test_find_json_object_handles_escaped_quotes():
    text = 'x {"q": "say \\"hi\\" }"} y'
    assert find_json_object(text) == '{"q": "say \\"hi\\" }"}'


def test_find_json_object_unbalanced_returns_none():
    assert find_json_object("no json { here") is None


@pytest.mark.parametrize("reply", ["", "just words", "[1, 2, 3]", None])
def test_extract_json_rejects_non_objects(reply):
    with pytest.raises(ValueError):
        extract_json(reply)


def test_missing_api_key_is_config_error():
    client = LLMClient(api_key="")
    assert not client.configured
    with pytest.raises(GatewayConfigError) as exc:
        client._call_api("system", "user")
    assert exc.value.message == "LLM_API_KEY not configured"
