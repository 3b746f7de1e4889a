import asyncio

import pytest

from conftest import FakeResponse, FakeTransport, chat_body
from tool_box.tools_impl.web_search.exceptions import WebSearchError
from tool_box.tools_impl.web_search.planner import (
    SUB_QUERY_MARKER,
    is_sub_query,
    mark_sub_query,
    parse_plan,
    split_query,
    strip_code_fence,
    strip_sub_query_marker,
)


def test_marker_round_trip():
    tagged = mark_sub_query("what is rust")
    assert tagged == "[SUB_QUERY] what is rust"
    assert is_sub_query(tagged)
    assert not is_sub_query("what is rust")
    assert strip_sub_query_marker(tagged) == "what is rust"


def test_strip_code_fence_variants():
    assert strip_code_fence('```json\n["a"]\n```') == '["a"]'
    assert strip_code_fence('```JSON ["a"] ```') == '["a"]'
    assert strip_code_fence('```\n["a"]\n```') == '["a"]'
    assert strip_code_fence('  ["a"]  ') == '["a"]'


def test_parse_fenced_plan():
    assert parse_plan('```json\n["a","b"]\n```') == [f"{SUB_QUERY_MARKER} a", f"{SUB_QUERY_MARKER} b"]


def test_parse_plan_drops_non_string_entries():
    assert parse_plan('[null, "real question", {"x": 1}, 2, "  "]') == [f"{SUB_QUERY_MARKER} real question"]


@pytest.mark.parametrize("raw", ["not json", '{"a": 1}', "[]", '"text"', '[null, {"x": 1}, 2]'])
def test_parse_plan_rejects_invalid_output(raw):
    with pytest.raises(WebSearchError) as excinfo:
        parse_plan(raw)
    assert excinfo.value.code == "decomposition_failed"


def test_split_query_uses_analysis_model_and_plan_size(make_client):
    transport = FakeTransport(FakeResponse(200, chat_body('["x", "y", "z"]')))
    client = make_client(transport, max_query_plan=3, analysis_model_id="planner-model")

    sub_queries = asyncio.run(split_query(client, "compare two databases"))

    assert [strip_sub_query_marker(sq) for sq in sub_queries] == ["x", "y", "z"]
    payload = transport.calls[0]["payload"]
    assert payload["model"] == "planner-model"
    assert "3 sub-questions" in payload["messages"][1]["content"]
    assert "compare two databases" in payload["messages"][1]["content"]
    assert "JSON array" in payload["messages"][0]["content"]


def test_split_query_falls_back_to_search_model(make_client):
    transport = FakeTransport(FakeResponse(200, chat_body('["x"]')))
    client = make_client(transport, max_query_plan=2)

    asyncio.run(split_query(client, "q"))

    assert transport.calls[0]["payload"]["model"] == "search-model"
