"""
tests.test_permissions

Permission catalog builder and permission-set evaluation.
"""

from __future__ import annotations

import pytest

from shopdesk.auth.permissions import (
    ACTIONS,
    WILDCARD,
    NamedPermission,
    PermissionSet,
    Wildcard,
    base_keys,
    build_catalog,
    default_catalog,
    is_reserved,
    merge_permissions,
    parse_permission,
    unknown_permissions,
)


def test_catalog_is_full_cross_product() -> None:
    keys = ["products", "orders", "roles"]
    catalog = build_catalog(keys)

    assert len(catalog) == len(keys) * 4
    assert len(set(catalog)) == len(catalog)
    assert catalog[:4] == [
        "products.access",
        "products.create",
        "products.update",
        "products.delete",
    ]
    for perm in catalog:
        key, _, action = perm.rpartition(".")
        assert key in keys
        assert action in ACTIONS


def test_catalog_collapses_repeated_keys() -> None:
    assert build_catalog(["orders", "orders", "roles"]) == build_catalog(["orders", "roles"])


def test_empty_key_list_yields_empty_catalog() -> None:
    assert build_catalog([]) == []


def test_default_catalog_matches_groups_and_never_contains_wildcard() -> None:
    catalog = default_catalog()
    assert len(catalog) == len(set(base_keys())) * len(ACTIONS)
    assert "*" not in catalog
    assert "hr.roles.update" in catalog
    assert "sales.cashbox.shifts.delete" in catalog


def test_catalog_is_deterministic() -> None:
    assert default_catalog() == default_catalog()


def test_merge_is_additive_and_idempotent() -> None:
    existing = ["custom.report.access", "products.catalog.access"]
    catalog = default_catalog()

    once = merge_permissions(existing, catalog)
    twice = merge_permissions(once, catalog)

    assert once[:2] == existing
    assert len(once) == len(catalog) + 1
    assert twice == once


def test_merge_never_removes_permissions() -> None:
    merged = merge_permissions(["legacy.thing.access"], build_catalog(["orders"]))
    assert "legacy.thing.access" in merged


def test_unknown_permissions_is_advisory_and_ignores_wildcard() -> None:
    catalog = build_catalog(["orders"])
    perms = ["*", "orders.access", "reports.custom.access", "reports.custom.access"]
    assert unknown_permissions(perms, catalog) == ["reports.custom.access"]


def test_parse_permission_is_a_tagged_union() -> None:
    assert parse_permission("*") is WILDCARD
    assert isinstance(parse_permission("*"), Wildcard)
    named = parse_permission("products.catalog.update")
    assert named == NamedPermission("products.catalog.update")
    assert isinstance(named, NamedPermission)
    assert named.resource == "products.catalog"
    assert named.action == "update"


def test_wildcard_grants_everything_including_non_catalog() -> None:
    perms = PermissionSet.from_strings(["*"])
    assert perms.grants("products.access")
    assert perms.grants("tenants.create")
    assert perms.grants("something.never.generated")


@pytest.mark.parametrize(
    ("required", "granted"),
    [
        ("products.access", True),
        ("products.update", False),
        ("orders.access", False),
        ("products", False),
        ("products.*", False),
        ("*", False),
    ],
)
def test_named_permissions_require_exact_match(required: str, granted: bool) -> None:
    perms = PermissionSet.from_strings(["products.access"])
    assert perms.grants(required) is granted


def test_empty_permission_set_denies() -> None:
    perms = PermissionSet.from_strings([])
    assert not perms
    assert not perms.grants("products.access")


@pytest.mark.parametrize(
    ("perm", "reserved"),
    [
        ("*", True),
        ("tenants.access", True),
        ("tenants.create", True),
        ("hr.roles.update", False),
        ("products.access", False),
        ("tenantsx.access", False),
    ],
)
def test_platform_permissions_are_reserved(perm: str, reserved: bool) -> None:
    assert is_reserved(perm) is reserved


def test_catalog_holds_no_reserved_entries() -> None:
    assert not [p for p in default_catalog() if is_reserved(p)]
