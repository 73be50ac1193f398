"""
shopdesk.auth.permissions

Permission catalog and permission-set evaluation.

Responsibilities:
- Hold the static, grouped catalog of resource base keys.
- Build the full `<resource-key>.<action>` catalog (cross-product with ACTIONS).
- Merge permission lists additively (seeding) and flag unknown entries.
- Model permissions as a tagged union (wildcard vs. named) for evaluation.
- Mark platform-level permissions that only a wildcard holder may grant.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Final

ACTIONS: Final[tuple[str, ...]] = ("access", "create", "update", "delete")

WILDCARD_TOKEN: Final[str] = "*"


@dataclass(frozen=True, slots=True)
class PermissionItem:
    key: str
    name: str


@dataclass(frozen=True, slots=True)
class PermissionGroup:
    key: str
    name: str
    items: tuple[PermissionItem, ...]


def _group(key: str, name: str, *items: tuple[str, str]) -> PermissionGroup:
    return PermissionGroup(key=key, name=name, items=tuple(PermissionItem(k, n) for k, n in items))


# Order matters: it drives catalog order and the /permissions listing.
PERMISSION_GROUPS: Final[tuple[PermissionGroup, ...]] = (
    _group("general", "General", ("dashboard", "Dashboard")),
    _group(
        "products",
        "Products",
        ("products.catalog", "Catalog"),
        ("products.categories", "Categories"),
        ("products.attributes", "Attributes"),
        ("products.characteristics", "Characteristics"),
        ("products.brands", "Brands"),
        ("products.warehouses", "Warehouses"),
        ("products.parameters", "Parameters"),
        ("products.import", "Import"),
        ("products.orders", "Orders"),
        ("products.inventory", "Inventory"),
        ("products.transfer", "Transfer"),
        ("products.repricing", "Repricing"),
        ("products.writeoff", "Write-Off"),
        ("products.suppliers", "Suppliers"),
    ),
    _group(
        "sales",
        "Sales",
        ("sales.new", "New Sale"),
        ("sales.all", "All Sales"),
        ("sales.cashbox.shifts", "Cashbox shifts"),
        ("sales.cashbox.operations", "Cashbox operations"),
    ),
    _group(
        "customers",
        "Customers",
        ("customers.list", "Customers List"),
        ("customers.groups", "Customer groups"),
        ("customers.loyalty", "Loyalty program"),
        ("customers.debts", "Customers' debts"),
    ),
    _group(
        "crm",
        "CRM",
        ("crm.leads", "Leads"),
        ("crm.deals", "Deals"),
        ("crm.events", "Events"),
        ("crm.calendar", "Calendar"),
        ("crm.auto", "Auto Responder"),
        ("crm.contacts", "Contacts"),
    ),
    _group(
        "marketing",
        "Marketing",
        ("marketing.promotion", "Promotion"),
        ("marketing.promocodes", "Promo codes"),
        ("marketing.sms", "SMS mailing"),
        ("marketing.giftcards", "Gift Cards"),
    ),
    _group(
        "shop",
        "Shop",
        ("shop.service", "Shop Service"),
        ("shop.unit", "Shop Unit"),
        ("shop.customer", "Shop Customer"),
        ("shop.vendor", "Shop Vendor"),
    ),
    _group(
        "reports",
        "Reports",
        ("reports.fav", "Favourites"),
        ("reports.shop", "Shop"),
        ("reports.products", "Products"),
        ("reports.sellers", "Sellers"),
        ("reports.customers", "Customers"),
        ("reports.leads", "Leads"),
        ("reports.deals", "Deals"),
        ("reports.finance", "Finance"),
    ),
    _group(
        "finance",
        "Finance",
        ("finance.categories", "Finance Categories"),
        ("finance.transactions", "Financial transactions"),
        ("finance.accounts", "State of accounts"),
    ),
    _group("hr", "HR Management", ("hr.users", "Employees"), ("hr.roles", "Roles")),
    _group(
        "settings",
        "Settings",
        ("settings.profile", "Profile"),
        ("settings.integrations", "Integrations"),
        ("settings.company", "Company"),
        ("settings.stores", "Stores"),
        ("settings.tariff", "Tariff"),
        ("settings.receipts", "Receipts"),
        ("settings.payments", "Currencies and payments"),
        ("settings.products", "Products"),
        ("settings.notifications", "Notifications"),
        ("settings.pricetags", "Price Tags"),
    ),
)


def base_keys(groups: Iterable[PermissionGroup] = PERMISSION_GROUPS) -> list[str]:
    return [item.key for group in groups for item in group.items]


def build_catalog(keys: Iterable[str], actions: Sequence[str] = ACTIONS) -> list[str]:
    """
    Cross-product of resource base keys and actions, as `key.action` strings.

    Order is deterministic (keys outer, actions inner) and repeated base keys
    collapse, so the result holds exactly `len(unique keys) * len(actions)`
    entries. An empty key list yields an empty catalog.
    """

    out: list[str] = []
    seen: set[str] = set()
    for key in keys:
        if key in seen:
            continue
        seen.add(key)
        out.extend(f"{key}.{action}" for action in actions)
    return out


def default_catalog() -> list[str]:
    return build_catalog(base_keys())


def merge_permissions(existing: Iterable[str], additions: Iterable[str]) -> list[str]:
    """
    Additive union: keeps `existing` as-is (order included) and appends unseen
    `additions`. Never drops an entry, so re-running a seed is a no-op.
    """

    merged = list(dict.fromkeys(existing))
    present = set(merged)
    for perm in additions:
        if perm not in present:
            present.add(perm)
            merged.append(perm)
    return merged


def unknown_permissions(permissions: Iterable[str], catalog: Iterable[str]) -> list[str]:
    # Advisory only: custom permissions are allowed, callers just log these.
    known = set(catalog)
    return [p for p in dict.fromkeys(permissions) if p != WILDCARD_TOKEN and p not in known]


class Wildcard:
    """The `*` sentinel: grants every permission."""

    __slots__ = ()
    _instance: Wildcard | None = None

    def __new__(cls) -> Wildcard:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "WILDCARD"

    def __str__(self) -> str:
        return WILDCARD_TOKEN


WILDCARD: Final[Wildcard] = Wildcard()


@dataclass(frozen=True, slots=True)
class NamedPermission:
    value: str

    @property
    def resource(self) -> str:
        return self.value.rpartition(".")[0]

    @property
    def action(self) -> str:
        return self.value.rpartition(".")[2]

    def __str__(self) -> str:
        return self.value


Permission = Wildcard | NamedPermission


def parse_permission(raw: str) -> Permission:
    if raw == WILDCARD_TOKEN:
        return WILDCARD
    return NamedPermission(raw)


# Platform-level resources: only a wildcard holder may hand these out.
RESERVED_RESOURCES: Final[frozenset[str]] = frozenset({"tenants"})


def is_reserved(raw: str) -> bool:
    perm = parse_permission(raw)
    if isinstance(perm, Wildcard):
        return True
    return perm.resource in RESERVED_RESOURCES


@dataclass(frozen=True, slots=True)
class PermissionSet:
    wildcard: bool
    named: frozenset[str]

    @classmethod
    def from_strings(cls, raw: Iterable[str]) -> PermissionSet:
        wildcard = False
        named: set[str] = set()
        for perm in map(parse_permission, raw):
            if isinstance(perm, Wildcard):
                wildcard = True
            elif isinstance(perm, NamedPermission):
                named.add(perm.value)
            else:  # pragma: no cover
                raise TypeError(f"unexpected permission type: {perm!r}")
        return cls(wildcard=wildcard, named=frozenset(named))

    def grants(self, required: str) -> bool:
        if self.wildcard:
            return True
        # Exact match only: `products.access` does not imply `products.update`.
        return required in self.named

    def __bool__(self) -> bool:
        return self.wildcard or bool(self.named)


# --- Module Notes -----------------------------------------------------------
# Catalog entries whose base key is later removed stay on existing roles; they
# are inert (no route checks them) and `unknown_permissions` reports them.
