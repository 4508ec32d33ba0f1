"""Async client for the Obsidian Local REST API"""

import logging
from urllib.parse import quote, unquote

import httpx

from .config import get_settings
from .errors import InvalidPathError

logger = logging.getLogger(__name__)


class VaultClient:
    """
    Thin wrapper over the vault endpoints of the Local REST API.

    Every call is a single request bounded by the client timeout. Errors
    (``httpx.HTTPStatusError``, ``httpx.TimeoutException``...) surface unmodified.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
        verify_ssl: bool | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.obsidian_base_url
        self.api_key = api_key if api_key is not None else settings.obsidian_api_key
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.verify_ssl = verify_ssl if verify_ssl is not None else settings.verify_ssl
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url.rstrip("/"),
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
                verify=self.verify_ssl,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "VaultClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # === Path handling ===

    @staticmethod
    def validate_path(path: str) -> None:
        """Reject traversal, including percent-encoded ``%2e%2e``"""
        decoded = unquote(path)
        # 只拒绝 ".." 路径段，"Ideas... later.md" 这类文件名合法
        has_parent_segment = any(segment == ".." for segment in decoded.split("/"))
        if has_parent_segment or decoded.startswith("/") or "//" in decoded:
            raise InvalidPathError(f"Invalid path: traversal not allowed ({path})")

    @staticmethod
    def encode_path(path: str) -> str:
        """Percent-encode each segment separately, keeping the separators"""
        return "/".join(quote(segment, safe="") if segment else "" for segment in path.split("/"))

    def _url(self, path: str) -> str:
        self.validate_path(path)
        return f"/vault/{self.encode_path(path)}"

    # === Listing ===

    async def list_vault(self, path: str = "") -> tuple[list[str], list[str]]:
        """
        List one directory level.

        Returns:
            Tuple of (files, folders), names only, folders without trailing slash
        """
        # The API needs a trailing slash to list a directory
        dir_path = f"{path}/" if path and not path.endswith("/") else path
        response = await self.client.get(self._url(dir_path))
        response.raise_for_status()

        # 文件与文件夹混在一起返回，文件夹以 "/" 结尾
        items: list[str] = response.json().get("files") or []
        files = [item for item in items if not item.endswith("/")]
        folders = [item[:-1] for item in items if item.endswith("/")]
        return files, folders

    # === Files ===

    async def read_file(self, path: str) -> str:
        response = await self.client.get(
            self._url(path),
            headers={"Accept": "text/markdown"},
        )
        response.raise_for_status()
        return response.text

    async def write_file(self, path: str, content: str) -> None:
        response = await self.client.put(
            self._url(path),
            content=content.encode("utf-8"),
            headers={"Content-Type": "text/markdown"},
        )
        if response.is_error:
            logger.debug(f"Vault API error {response.status_code} writing {path}: {response.text[:200]}")
        response.raise_for_status()

    async def append_file(self, path: str, content: str) -> None:
        response = await self.client.patch(
            self._url(path),
            content=content.encode("utf-8"),
            headers={"Content-Type": "text/markdown"},
        )
        response.raise_for_status()

    async def delete_file(self, path: str) -> None:
        response = await self.client.delete(self._url(path))
        response.raise_for_status()

    async def file_exists(self, path: str) -> bool:
        response = await self.client.get(self._url(path))
        if response.status_code == 404:
            return False
        response.raise_for_status()
        return True

    # === Directories ===

    async def directory_exists(self, path: str) -> bool:
        dir_path = path if path.endswith("/") else f"{path}/"
        response = await self.client.get(self._url(dir_path))
        if response.status_code == 404:
            return False
        response.raise_for_status()
        return True


# Process-wide client, closed by the app lifespan
_vault_client: VaultClient | None = None


def get_vault_client() -> VaultClient:
    """Get or create the shared vault client"""
    global _vault_client
    if _vault_client is None:
        _vault_client = VaultClient()
    return _vault_client


async def close_vault_client() -> None:
    global _vault_client
    if _vault_client is not None:
        await _vault_client.aclose()
        _vault_client = None
