"""内容搜索测试：行匹配、上下文、结果上限与读取失败。"""

import httpx
import pytest

from conftest import FakeVault
from vaultlink.client import VaultClient
from vaultlink.content_search import compile_pattern, match_lines, search_content
from vaultlink.errors import SearchPatternError
from vaultlink.tools import search


@pytest.mark.asyncio
async def test_match_carries_one_line_of_context():
    vault = FakeVault({"note.md": "foo\nbar baz\nqux"})

    matches = await search_content(vault, "bar")

    assert len(matches) == 1
    match = matches[0]
    assert match.file == "note.md"
    assert match.line == 2
    assert match.content == "bar baz"
    assert match.context_before == "foo"
    assert match.context_after == "qux"


@pytest.mark.asyncio
async def test_context_is_absent_at_file_boundaries():
    vault = FakeVault({"note.md": "hit one\nmiddle\nhit two"})

    matches = await search_content(vault, "hit")

    assert [m.line for m in matches] == [1, 3]
    assert matches[0].to_dict() == {
        "file": "note.md",
        "line": 1,
        "content": "hit one",
        "context_after": "middle",
    }
    assert "context_after" not in matches[1].to_dict()
    assert matches[1].context_before == "middle"


@pytest.mark.asyncio
async def test_invalid_regex_fails_before_touching_the_vault(vault):
    with pytest.raises(SearchPatternError, match="Invalid regex pattern"):
        await search_content(vault, "([unclosed", use_regex=True)

    assert vault.read_calls == []
    assert vault.list_calls == []


@pytest.mark.asyncio
async def test_invalid_regex_through_the_tool(vault):
    result = await search(vault, "([unclosed", regex=True)

    assert not result.success
    assert "Invalid regex pattern" in result.error
    assert vault.read_calls == []


@pytest.mark.asyncio
async def test_stops_reading_once_max_results_reached():
    files = {f"notes/{i:02d}.md": "needle here\nneedle again" for i in range(10)}
    vault = FakeVault(files)

    matches = await search_content(vault, "needle", max_results=3)

    assert len(matches) == 3
    # Two files hold the three matches; nothing after them is read
    assert len(vault.read_calls) == 2


@pytest.mark.asyncio
async def test_unreadable_file_is_skipped(caplog):
    vault = FakeVault(
        {"a.md": "target", "b.md": "target", "c.md": "target"},
        fail_read={"b.md"},
    )

    matches = await search_content(vault, "target")

    assert sorted(m.file for m in matches) == ["a.md", "c.md"]
    assert "Failed to read file b.md" in caplog.text


@pytest.mark.asyncio
async def test_only_markdown_files_are_scanned(vault):
    matches = await search_content(vault, "alpha")

    assert [m.file for m in matches] == ["projects/alpha/plan.md"]
    assert "projects/alpha/notes.txt" not in vault.read_calls


@pytest.mark.asyncio
async def test_literal_query_escapes_regex_characters():
    vault = FakeVault({"n.md": "cost is a.b\nvalue axb\n(x+y)"})

    assert [m.line for m in await search_content(vault, "a.b")] == [1]
    assert [m.line for m in await search_content(vault, "(x+y)")] == [3]
    assert [m.line for m in await search_content(vault, "a.b", use_regex=True)] == [1, 2]


@pytest.mark.asyncio
async def test_case_sensitivity():
    vault = FakeVault({"n.md": "Alpha\nalpha"})

    assert len(await search_content(vault, "ALPHA")) == 2
    assert [m.line for m in await search_content(vault, "Alpha", case_sensitive=True)] == [1]


@pytest.mark.asyncio
async def test_search_tool_payload(vault):
    result = await search(vault, "plan")

    assert result.success
    assert result.data["total_matches"] == len(result.data["matches"]) == 1
    assert result.data["matches"][0]["file"] == "journal/2024/01/2024-01-15.md"


@pytest.mark.asyncio
async def test_search_tool_requires_query(vault):
    result = await search(vault, "")

    assert not result.success
    assert result.error == "query parameter is required"
    assert vault.list_calls == []


def test_match_lines_respects_limit():
    pattern = compile_pattern("x")
    matches = match_lines("f.md", "x\nx\nx\nx", pattern, limit=2)

    assert [m.line for m in matches] == [1, 2]


@pytest.mark.asyncio
async def test_only_newline_breaks_lines():
    vault = FakeVault({"n.md": "intro\u2028more intro\ntarget\x0cpage\r\nafter"})

    matches = await search_content(vault, "target")

    assert len(matches) == 1
    assert matches[0].line == 2
    assert matches[0].content == "target\x0cpage"
    assert matches[0].context_before == "intro\u2028more intro"
    assert matches[0].context_after == "after"


def test_crlf_content_matches_like_lf():
    pattern = compile_pattern("b")
    matches = match_lines("f.md", "a\r\nb\r\nc", pattern, limit=10)

    assert [(m.line, m.content, m.context_before, m.context_after) for m in matches] == [(2, "b", "a", "c")]


@pytest.mark.asyncio
async def test_ellipsis_filenames_are_searched_over_http():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/vault/":
            return httpx.Response(200, json={"files": ["Ideas... later.md"]})
        return httpx.Response(200, text="needle")

    client = VaultClient(base_url="https://vault.test", api_key="k", transport=httpx.MockTransport(handler))
    async with client:
        matches = await search_content(client, "needle")

    assert [(m.file, m.line) for m in matches] == [("Ideas... later.md", 1)]
