import asyncio

import pytest

from models.errors import ParseError, TransportError
from tools.web.contracts import SourceSuggestion
from tools.web.source_discovery import SourceDiscovery, build_discovery_prompt, parse_suggestion


def test_prompt_embeds_query_and_language():
    prompt = build_discovery_prompt("香港天氣", "zh-TW")
    assert prompt.startswith('Based on the user query "香港天氣" (language: zh-TW)')
    assert '"searchQueries"' in prompt
    assert prompt.endswith("Provide ONLY the JSON object in your response.")


def test_parse_plain_json():
    suggestion = parse_suggestion('{"searchQueries": ["hk weather"], "urls": ["https://hko.gov.hk"]}')
    assert suggestion.search_queries == ("hk weather",)
    assert suggestion.urls == ("https://hko.gov.hk",)


def test_parse_fenced_json_with_prose():
    raw = 'Sure! Here you go:\n```json\n{"urls": ["https://a.example/x"]}\n```'
    suggestion = parse_suggestion(raw)
    assert suggestion.urls == ("https://a.example/x",)
    assert suggestion.search_queries == ()


def test_parse_caps_each_list_at_five():
    urls = [f"https://s{i}.example" for i in range(8)]
    suggestion = parse_suggestion('{"urls": [%s]}' % ", ".join(f'"{u}"' for u in urls))
    assert suggestion.urls == tuple(urls[:5])


@pytest.mark.parametrize(
    "raw",
    [
        "no json here",
        "{not valid json}",
        '{"urls": "https://not-a-list.example"}',
        '{"somethingElse": []}',
        "",
    ],
)
def test_parse_failures_raise_parse_error(raw):
    with pytest.raises(ParseError):
        parse_suggestion(raw)


def test_suggest_sources_uses_primary_model(scripted_client):
    client = scripted_client(discovery_reply='{"urls": ["https://a.example/x"]}')
    discovery = SourceDiscovery(client, "primary-model")

    suggestion = asyncio.run(discovery.suggest_sources("香港天氣", "zh-TW"))

    assert suggestion.urls == ("https://a.example/x",)
    assert [model for model, _ in client.calls] == ["primary-model"]


def test_suggest_sources_degrades_on_unparseable_reply(scripted_client):
    discovery = SourceDiscovery(scripted_client(discovery_reply="I cannot help"), "m1")
    suggestion = asyncio.run(discovery.suggest_sources("q", "en"))
    assert suggestion == SourceSuggestion()
    assert suggestion.is_empty


def test_suggest_sources_degrades_on_transport_error(scripted_client):
    discovery = SourceDiscovery(scripted_client(discovery_reply=TransportError("down")), "m1")
    assert asyncio.run(discovery.suggest_sources("q", "en")).is_empty
