"""Mod resolvers.

Each manifest source has one resolver; :func:`get_resolvers` builds the
full set keyed by source name.
"""

from modctl.core.config import DEFAULT_REGISTRY_URL
from modctl.core.http import HttpClient
from modctl.models.manifest import ModSourceType
from modctl.registry.base import Resolver
from modctl.registry.curseforge import CurseForgeResolver
from modctl.registry.direct import DirectUrlResolver
from modctl.registry.modrinth import ModrinthResolver


def get_resolvers(
    client: HttpClient,
    registry_url: str = DEFAULT_REGISTRY_URL,
) -> dict[ModSourceType, Resolver]:
    """Get resolver instances for every supported manifest source.

    Args:
        client: HTTP client shared by network-backed resolvers.
        registry_url: Modrinth API base URL.

    Returns:
        Mapping from source name to resolver.
    """
    resolvers: list[Resolver] = [
        ModrinthResolver(client, registry_url),
        CurseForgeResolver(),
        DirectUrlResolver(),
    ]
    return {r.source: r for r in resolvers}


__all__ = [
    "CurseForgeResolver",
    "DirectUrlResolver",
    "ModrinthResolver",
    "Resolver",
    "get_resolvers",
]
