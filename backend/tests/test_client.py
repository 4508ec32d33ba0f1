"""Vault HTTP 客户端测试（MockTransport 模拟 Local REST API）。"""

import httpx
import pytest

from vaultlink.client import VaultClient
from vaultlink.errors import InvalidPathError


def make_client(handler) -> VaultClient:
    return VaultClient(
        base_url="https://vault.test:27124",
        api_key="secret",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_list_vault_splits_files_and_folders():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.raw_path.decode()
        seen["auth"] = request.headers["authorization"]
        return httpx.Response(200, json={"files": ["a.md", "Sub/", "b.txt", "🧪 Lab/"]})

    async with make_client(handler) as client:
        files, folders = await client.list_vault("Projects")

    assert files == ["a.md", "b.txt"]
    assert folders == ["Sub", "🧪 Lab"]
    # Trailing slash is added for directory listings
    assert seen["path"] == "/vault/Projects/"
    assert seen["auth"] == "Bearer secret"


@pytest.mark.asyncio
async def test_root_listing_and_missing_files_key():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.raw_path == b"/vault/"
        return httpx.Response(200, json={})

    async with make_client(handler) as client:
        assert await client.list_vault() == ([], [])


@pytest.mark.asyncio
async def test_segments_are_encoded_independently():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path.decode())
        return httpx.Response(200, text="hello")

    async with make_client(handler) as client:
        content = await client.read_file("🧪 Lab/my note#1.md")

    assert content == "hello"
    assert seen == ["/vault/%F0%9F%A7%AA%20Lab/my%20note%231.md"]


def test_encode_path_keeps_separators():
    assert VaultClient.encode_path("a b/c?d.md") == "a%20b/c%3Fd.md"
    assert VaultClient.encode_path("folder/") == "folder/"


@pytest.mark.parametrize("path", ["../secret.md", "notes/../../x.md", "%2e%2e/x.md", "/abs.md", "a//b.md"])
def test_validate_path_rejects_traversal(path):
    with pytest.raises(InvalidPathError):
        VaultClient.validate_path(path)


@pytest.mark.asyncio
async def test_traversal_is_rejected_before_any_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    async with make_client(handler) as client:
        with pytest.raises(InvalidPathError):
            await client.read_file("../etc/passwd")


@pytest.mark.asyncio
async def test_file_exists_maps_404_to_false_and_raises_otherwise():
    statuses = {"/vault/yes.md": 200, "/vault/no.md": 404, "/vault/boom.md": 500}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(statuses[request.url.path], text="")

    async with make_client(handler) as client:
        assert await client.file_exists("yes.md") is True
        assert await client.file_exists("no.md") is False
        with pytest.raises(httpx.HTTPStatusError):
            await client.file_exists("boom.md")


@pytest.mark.asyncio
async def test_directory_exists_adds_trailing_slash():
    def handler(request: httpx.Request) -> httpx.Response:
        status = 200 if request.url.path == "/vault/Notes/" else 404
        return httpx.Response(status, json={"files": []})

    async with make_client(handler) as client:
        assert await client.directory_exists("Notes") is True
        assert await client.directory_exists("Missing") is False


@pytest.mark.asyncio
async def test_write_append_delete_use_expected_methods():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, request.url.path, request.content.decode(), request.headers["content-type"]))
        return httpx.Response(204)

    async with make_client(handler) as client:
        await client.write_file("n.md", "body")
        await client.append_file("n.md", "more")
        await client.delete_file("n.md")

    assert calls == [
        ("PUT", "/vault/n.md", "body", "text/markdown"),
        ("PATCH", "/vault/n.md", "more", "text/markdown"),
        ("DELETE", "/vault/n.md", "", "application/json"),
    ]


@pytest.mark.asyncio
async def test_http_errors_surface_unmodified():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503)

    async with make_client(handler) as client:
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            await client.list_vault("x")

    assert exc_info.value.response.status_code == 503


@pytest.mark.parametrize("path", ["Ideas... later.md", "v1..2/notes.md", "a/..hidden.md", "wait..%20what.md"])
def test_validate_path_accepts_dots_inside_names(path):
    VaultClient.validate_path(path)


@pytest.mark.asyncio
async def test_ellipsis_filename_is_readable():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.raw_path.decode())
        return httpx.Response(200, text="later")

    async with make_client(handler) as client:
        assert await client.read_file("v1..2/Ideas... later.md") == "later"

    assert seen == ["/vault/v1..2/Ideas...%20later.md"]
