"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules, including a
small in-memory stand-in for the Modrinth registry served through
``httpx.MockTransport``.
"""

import json
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import pytest
from modctl.core.http import HttpClient
from modctl.models.manifest import Manifest, ModEntry

API = "https://api.modrinth.com/v2"

# Smallest content the artifact validator accepts
JAR_BYTES = b"PK\x03\x04" + b"\x00" * 26


def version_record(
    version_number: str,
    filename: str,
    *,
    loaders: tuple[str, ...] = ("fabric",),
    game_versions: tuple[str, ...] = ("1.20.1",),
    url: str | None = None,
) -> dict[str, Any]:
    """Build a Modrinth version record."""
    return {
        "id": f"ver-{filename}",
        "version_number": version_number,
        "loaders": list(loaders),
        "game_versions": list(game_versions),
        "files": [
            {
                "url": url or f"https://cdn.modrinth.com/data/{filename}",
                "filename": filename,
            }
        ],
    }


@dataclass
class FakeRegistry:
    """In-memory Modrinth registry and file CDN.

    Attributes:
        projects: project_id -> (title, slug, versions newest first).
        files: download URL -> body. Unknown URLs serve JAR_BYTES.
        requests: Every request seen, in order.
    """

    projects: dict[str, tuple[str, str, list[dict[str, Any]]]] = field(default_factory=dict)
    files: dict[str, bytes] = field(default_factory=dict)
    failing_urls: set[str] = field(default_factory=set)
    requests: list[httpx.Request] = field(default_factory=list)

    def add_project(
        self,
        project_id: str,
        title: str,
        versions: list[dict[str, Any]],
        slug: str | None = None,
    ) -> None:
        self.projects[project_id] = (title, slug or title.lower().replace(" ", "-"), versions)

    @property
    def downloads(self) -> list[str]:
        """URLs of all file downloads requested."""
        return [str(r.url) for r in self.requests if "/v2/" not in r.url.path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        url = str(request.url)

        if url in self.failing_urls:
            return httpx.Response(404)

        if path == "/v2/search":
            query = request.url.params["query"].lower()
            hits = [
                {
                    "project_id": pid,
                    "title": title,
                    "slug": slug,
                    "categories": ["fabric"],
                }
                for pid, (title, slug, _) in self.projects.items()
                if query in title.lower() or title.lower() in query
            ]
            return httpx.Response(200, json={"hits": hits})

        if path.startswith("/v2/project/") and path.endswith("/version"):
            project_id = path.split("/")[3]
            if project_id not in self.projects:
                return httpx.Response(404, json={"error": "not_found"})
            return httpx.Response(200, content=json.dumps(self.projects[project_id][2]))

        return httpx.Response(200, content=self.files.get(url, JAR_BYTES))


@pytest.fixture
def make_client() -> Iterator[Callable[..., HttpClient]]:
    """Factory for HttpClient instances backed by a mock handler, without backoff."""
    clients: list[HttpClient] = []

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        retries: int = 3,
    ) -> HttpClient:
        client = HttpClient(
            timeout=5.0,
            retries=retries,
            backoff=0,
            transport=httpx.MockTransport(handler),
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def registry() -> FakeRegistry:
    """Registry with Sodium and Fabric API projects."""
    fake = FakeRegistry()
    fake.add_project(
        "AANobbMI",
        "Sodium",
        [
            version_record("mc1.20.1-0.5.8", "sodium-fabric-0.5.8+mc1.20.1.jar"),
            version_record("mc1.20.1-0.5.7", "sodium-fabric-0.5.7+mc1.20.1.jar"),
            version_record(
                "mc1.20.4-0.5.8",
                "sodium-fabric-0.5.8+mc1.20.4.jar",
                game_versions=("1.20.4",),
            ),
        ],
    )
    fake.add_project(
        "P7dR8mSH",
        "Fabric API",
        [version_record("0.92.0+1.20.1", "fabric-api-0.92.0+1.20.1.jar")],
    )
    return fake


@pytest.fixture
def registry_client(
    registry: FakeRegistry,
    make_client: Callable[..., HttpClient],
) -> HttpClient:
    """HttpClient wired to the fake registry."""
    return make_client(registry.handler)


@pytest.fixture
def sample_manifest() -> Manifest:
    """Manifest with one searched and one id-based Modrinth entry."""
    return Manifest(
        mod_loader="fabric",
        game_version="1.20.1",
        mods=(
            ModEntry(name="Sodium"),
            ModEntry(name="Fabric API", project_id="P7dR8mSH"),
        ),
    )


@pytest.fixture
def mods_dir(tmp_path: Path) -> Path:
    """Empty mods directory."""
    path = tmp_path / "mods"
    path.mkdir()
    return path


@pytest.fixture
def jar_bytes() -> bytes:
    """Minimal body that passes artifact validation."""
    return JAR_BYTES


@pytest.fixture
def make_version() -> Callable[..., dict[str, Any]]:
    """Factory for Modrinth version records."""
    return version_record
