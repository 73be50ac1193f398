"""
tests.test_tenant_resolver

Tenant resolution precedence: header (id, then subdomain) -> host -> fallback.
"""

from __future__ import annotations

import pytest
from conftest import InMemoryDirectory

from shopdesk.errors import DirectoryUnavailable, TenantRequired
from shopdesk.tenancy.resolver import TenantResolver, extract_subdomain


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("shop.example.com", "shop"),
        ("Shop.Example.com", "shop"),
        ("shop.example.com:8443", "shop"),
        ("a.b.c.d", "a"),
        ("example.com", None),
        ("localhost", None),
        ("localhost:8080", None),
        ("10.0.0.12", None),
        ("10.0.0.12:8081", None),
        ("[::1]:8081", None),
        (".example.com", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_subdomain(host: str | None, expected: str | None) -> None:
    assert extract_subdomain(host) == expected


@pytest.mark.asyncio
async def test_header_as_subdomain_key(directory: InMemoryDirectory) -> None:
    acme = directory.add_tenant("acme")
    resolver = TenantResolver(directory, fallback_subdomain=None)

    tenant = await resolver.resolve(tenant_header="acme", host="example.com")

    assert tenant == acme
    # Not an id shape: the id reading is skipped, subdomain reading wins.
    assert ("tenant_by_id", "acme") not in directory.calls


@pytest.mark.asyncio
async def test_header_as_tenant_id(directory: InMemoryDirectory) -> None:
    acme = directory.add_tenant("acme")
    resolver = TenantResolver(directory, fallback_subdomain=None)

    assert await resolver.resolve(tenant_header=str(acme.id), host=None) == acme
    assert directory.calls == [("tenant_by_id", str(acme.id))]


@pytest.mark.asyncio
async def test_header_beats_host_and_fallback(directory: InMemoryDirectory) -> None:
    acme = directory.add_tenant("acme")
    directory.add_tenant("shop")
    directory.add_tenant("demo")
    resolver = TenantResolver(directory)

    assert await resolver.resolve(tenant_header="acme", host="shop.example.com") == acme


@pytest.mark.asyncio
async def test_unknown_header_falls_through_to_host(directory: InMemoryDirectory) -> None:
    shop = directory.add_tenant("shop")
    resolver = TenantResolver(directory, fallback_subdomain=None)

    tenant = await resolver.resolve(tenant_header="nope", host="shop.example.com")

    assert tenant == shop
    assert directory.calls == [
        ("tenant_by_subdomain", "nope"),
        ("tenant_by_subdomain", "shop"),
    ]


@pytest.mark.asyncio
async def test_host_with_three_labels(directory: InMemoryDirectory) -> None:
    shop = directory.add_tenant("shop")
    resolver = TenantResolver(directory, fallback_subdomain=None)
    assert await resolver.resolve(tenant_header=None, host="shop.example.com") == shop


@pytest.mark.asyncio
async def test_two_label_host_without_fallback_tenant(directory: InMemoryDirectory) -> None:
    directory.add_tenant("shop")
    resolver = TenantResolver(directory)  # "demo" fallback, but not seeded

    with pytest.raises(TenantRequired) as exc:
        await resolver.resolve(tenant_header=None, host="example.com")
    assert exc.value.code == "TENANT_REQUIRED"
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_fallback_tenant(directory: InMemoryDirectory) -> None:
    demo = directory.add_tenant("demo")
    resolver = TenantResolver(directory)

    assert await resolver.resolve(tenant_header=None, host="unknown.example.com") == demo
    assert await resolver.resolve(tenant_header=None, host="example.com") == demo


@pytest.mark.asyncio
async def test_fallback_can_be_disabled(directory: InMemoryDirectory) -> None:
    directory.add_tenant("demo")
    resolver = TenantResolver(directory, fallback_subdomain=None)
    with pytest.raises(TenantRequired):
        await resolver.resolve(tenant_header=None, host="example.com")


@pytest.mark.asyncio
async def test_resolution_never_creates_tenants(directory: InMemoryDirectory) -> None:
    resolver = TenantResolver(directory)
    for header, host in [("newco", "newco.example.com"), (None, "x.example.com")]:
        with pytest.raises(TenantRequired):
            await resolver.resolve(tenant_header=header, host=host)
    assert directory.tenants == {}


@pytest.mark.asyncio
async def test_resolution_is_idempotent(directory: InMemoryDirectory) -> None:
    directory.add_tenant("shop")
    resolver = TenantResolver(directory)
    first = await resolver.resolve(tenant_header=None, host="shop.example.com")
    second = await resolver.resolve(tenant_header=None, host="shop.example.com")
    assert first == second


@pytest.mark.asyncio
async def test_store_failure_is_not_tenant_required(directory: InMemoryDirectory) -> None:
    directory.add_tenant("demo")
    directory.broken = True
    with pytest.raises(DirectoryUnavailable):
        await TenantResolver(directory).resolve(tenant_header="demo", host=None)
