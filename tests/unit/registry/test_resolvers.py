"""Unit tests for the direct-url and CurseForge resolvers and the resolver factory."""

from collections.abc import Callable

import httpx
import pytest
from modctl.core.errors import ErrorKind, UnsupportedSourceError
from modctl.core.http import HttpClient
from modctl.models.manifest import ModEntry
from modctl.registry import (
    CurseForgeResolver,
    DirectUrlResolver,
    ModrinthResolver,
    get_resolvers,
)
from modctl.registry.direct import synthesize_file_name


class TestDirectUrlResolver:
    """Tests for DirectUrlResolver."""

    def test_uses_given_file_name(self) -> None:
        entry = ModEntry(
            name="Custom Mod",
            version="1.0.0",
            source="url",
            download_url="https://example.com/mod.jar",
            file_name="custom-mod-1.0.0.jar",
        )

        artifact = DirectUrlResolver().resolve(entry, "fabric", "1.20.1")

        assert artifact.source_url == "https://example.com/mod.jar"
        assert artifact.target_file_name == "custom-mod-1.0.0.jar"
        assert artifact.version_label == "1.0.0"

    def test_synthesizes_file_name(self) -> None:
        """Without fileName the name is built from the entry name and version."""
        entry = ModEntry(
            name="My Cool Mod", version="2.1", source="url", download_url="https://x/y"
        )

        assert synthesize_file_name(entry) == "my-cool-mod-2.1.jar"

    def test_unversioned_is_latest(self) -> None:
        entry = ModEntry(name="Thing", source="url", download_url="https://x/y")

        artifact = DirectUrlResolver().resolve(entry, "forge", "1.20.1")

        assert artifact.target_file_name == "thing-latest.jar"
        assert artifact.version_label == "latest"

    def test_synthesized_name_has_no_path(self) -> None:
        entry = ModEntry(name="AC/DC", source="url", download_url="https://x/y")

        assert synthesize_file_name(entry) == "ac-dc-latest.jar"


class TestCurseForgeResolver:
    """Tests for CurseForgeResolver."""

    def test_always_unsupported(self) -> None:
        """CurseForge entries fail with UnsupportedSource."""
        with pytest.raises(UnsupportedSourceError) as exc_info:
            CurseForgeResolver().resolve(
                ModEntry(name="JEI", source="curseforge"), "forge", "1.20.1"
            )

        assert exc_info.value.kind is ErrorKind.UNSUPPORTED_SOURCE


class TestGetResolvers:
    """Tests for get_resolvers factory."""

    def test_one_resolver_per_source(self, make_client: Callable[..., HttpClient]) -> None:
        client = make_client(lambda request: httpx.Response(500))

        resolvers = get_resolvers(client)

        assert set(resolvers) == {"modrinth", "curseforge", "url"}
        assert isinstance(resolvers["modrinth"], ModrinthResolver)
        assert isinstance(resolvers["url"], DirectUrlResolver)
        assert all(source == r.source for source, r in resolvers.items())
