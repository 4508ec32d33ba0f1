"""共享测试夹具：内存版 vault REST API。"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from vaultlink.vault import cache as cache_module


def status_error(status_code: int, path: str) -> httpx.HTTPStatusError:
    """Build the error httpx raises for a non-2xx response."""
    request = httpx.Request("GET", f"https://vault.test/vault/{path}")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(f"{status_code} for {path}", request=request, response=response)


class FakeVault:
    """
    Implements the VaultClient methods over a dict of path -> content.

    Folders are implicit in file paths; ``empty_dirs`` adds folders that
    hold nothing. Listing a folder in ``fail_list`` or reading a file in
    ``fail_read`` raises.
    """

    def __init__(
        self,
        files: dict[str, str] | None = None,
        empty_dirs: set[str] | None = None,
        fail_list: set[str] | None = None,
        fail_read: set[str] | None = None,
        reject_missing_parent: bool = False,
        delay: float = 0.0,
    ):
        self.files = dict(files or {})
        self.empty_dirs = set(empty_dirs or ())
        self.fail_list = set(fail_list or ())
        self.fail_read = set(fail_read or ())
        self.reject_missing_parent = reject_missing_parent
        self.delay = delay

        self.list_calls: list[str] = []
        self.read_calls: list[str] = []
        self.write_calls: list[str] = []
        self.delete_calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _dir_exists(self, path: str) -> bool:
        if not path or path in self.empty_dirs:
            return True
        prefix = f"{path}/"
        return any(f.startswith(prefix) for f in self.files) or any(
            d.startswith(prefix) for d in self.empty_dirs
        )

    async def list_vault(self, path: str = "") -> tuple[list[str], list[str]]:
        path = path.rstrip("/")
        self.list_calls.append(path)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        if path in self.fail_list:
            raise status_error(500, f"{path}/")
        if not self._dir_exists(path):
            raise status_error(404, f"{path}/")

        prefix = f"{path}/" if path else ""
        files: list[str] = []
        folders: set[str] = set()
        for entry in list(self.files) + [f"{d}/" for d in self.empty_dirs]:
            if not entry.startswith(prefix) or entry == prefix:
                continue
            rest = entry[len(prefix):]
            if "/" in rest:
                folders.add(rest.split("/", 1)[0])
            else:
                files.append(rest)
        return sorted(files), sorted(folders)

    async def read_file(self, path: str) -> str:
        self.read_calls.append(path)
        await asyncio.sleep(0)
        if path in self.fail_read:
            raise status_error(500, path)
        if path not in self.files:
            raise status_error(404, path)
        return self.files[path]

    async def write_file(self, path: str, content: str) -> None:
        self.write_calls.append(path)
        await asyncio.sleep(0)
        if self.reject_missing_parent and "/" in path and not path.endswith("/keep.md"):
            parent = path.rsplit("/", 1)[0]
            if not self._dir_exists(parent):
                raise status_error(400, path)
        self.files[path] = content

    async def append_file(self, path: str, content: str) -> None:
        self.write_calls.append(path)
        await asyncio.sleep(0)
        self.files[path] = self.files.get(path, "") + content

    async def delete_file(self, path: str) -> None:
        self.delete_calls.append(path)
        await asyncio.sleep(0)
        if path not in self.files:
            raise status_error(404, path)
        del self.files[path]

    async def file_exists(self, path: str) -> bool:
        await asyncio.sleep(0)
        return path in self.files

    async def directory_exists(self, path: str) -> bool:
        await asyncio.sleep(0)
        return self._dir_exists(path.rstrip("/"))


SAMPLE_FILES = {
    "README.md": "# Vault\nwelcome",
    "inbox/todo.md": "buy milk\ncall bob",
    "projects/alpha/plan.md": "goal: ship alpha\nowner: ana",
    "projects/alpha/notes.txt": "plain text alpha",
    "projects/beta/🧪 Test note.md": "emoji folder test",
    "journal/2024/01/2024-01-15.md": "cold day\nwrote plan",
}


@pytest.fixture
def sample_files() -> dict[str, str]:
    return dict(SAMPLE_FILES)


@pytest.fixture
def vault(sample_files) -> FakeVault:
    return FakeVault(sample_files)


@pytest.fixture(autouse=True)
def fresh_files_cache(monkeypatch):
    """Each test starts with an empty process-wide files cache."""
    monkeypatch.setattr(cache_module, "_files_cache", None)
