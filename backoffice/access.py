"""
Static access-level tables and menu filtering.

The back-office menu is fixed.  Every page belongs to one security level
section, and a second table restricts some pages to employee accounts.
A page is visible when both tables allow it; clinic settings may raise
or lower the level of individual pages through ``page_access``.
"""
from __future__ import annotations

from typing import Any, Optional

DOCTOR = 0
STAFF = 1
OWNER = 2
SUPER_USER = 3

LEVELS = (DOCTOR, STAFF, OWNER, SUPER_USER)

LEVEL_TITLES = {
    DOCTOR: 'Akses Dokter',
    STAFF: 'Akses Kasir/Staff',
    OWNER: 'Akses Owner',
    SUPER_USER: 'Akses Super User',
}

ACCESS_LEVEL_TO_SECURITY = {
    'Dokter': DOCTOR,
    'Admin': STAFF,
    'Co-owner': OWNER,
    'Owner': SUPER_USER,
}

# (page id, label) per section, in menu order
PAGES_BY_LEVEL: dict[int, list[tuple[str, str]]] = {
    DOCTOR: [
        ('dashboard', 'Dashboard'),
        ('patients', 'Pasien'),
        ('forms', 'Formulir'),
        ('treatments', 'Tindakan'),
        ('medical-record-summary', 'Ringkasan Rekam Medis'),
        ('products', 'Produk'),
    ],
    STAFF: [
        ('product-field-trip', 'Produk Field Trip'),
        ('field-trip-sales', 'Penjualan Field Trip'),
        ('doctor-status', 'Status Dokter'),
        ('attendance', 'Absensi'),
        ('sitting-fees', 'Uang Duduk'),
        ('sales', 'Penjualan'),
        ('stock-opname', 'Stok Opname'),
        ('promo', 'Promo'),
        ('expenses', 'Pengeluaran'),
    ],
    OWNER: [
        ('salaries', 'Gaji'),
        ('reports', 'Laporan'),
    ],
    SUPER_USER: [
        ('security-settings', 'Pengaturan Keamanan'),
    ],
}

PAGE_LEVELS: dict[str, int] = {
    page: level for level, pages in PAGES_BY_LEVEL.items() for page, _ in pages
}
PAGE_LABELS: dict[str, str] = {
    page: label for pages in PAGES_BY_LEVEL.values() for page, label in pages
}

# user type -> pages; pages not listed here are employee only
MENU_PERMISSIONS: dict[str, tuple[str, ...]] = {
    'dashboard': ('doctor', 'employee'),
    'medical-record-summary': ('doctor', 'employee'),
    'attendance': ('doctor', 'employee'),
    'sitting-fees': ('doctor', 'employee'),
    'treatments': ('doctor', 'employee'),
    'patients': ('employee',),
    'forms': ('employee',),
    'doctor-status': ('employee',),
    'products': ('employee',),
    'product-field-trip': ('employee',),
    'field-trip-sales': ('employee',),
    'stock-opname': ('employee',),
    'promo': ('employee',),
    'salaries': ('employee',),
    'sales': ('employee',),
    'expenses': ('employee',),
    'reports': ('employee',),
}


def security_level(user) -> int:
    """Map an account to its security level (superusers are always SUPER_USER)."""
    if not user or not getattr(user, 'is_authenticated', False):
        return -1
    if getattr(user, 'is_superuser', False):
        return SUPER_USER
    return ACCESS_LEVEL_TO_SECURITY.get(getattr(user, 'access_level', '') or '', DOCTOR)


def page_level(page: str, overrides: Optional[dict[str, Any]] = None) -> int:
    if overrides and page in overrides:
        try:
            return int(overrides[page])
        except (TypeError, ValueError):
            pass
    return PAGE_LEVELS.get(page, SUPER_USER)


def user_type_allows(page: str, user_type: Optional[str]) -> bool:
    # no user type known -> do not filter
    if not user_type:
        return True
    allowed = MENU_PERMISSIONS.get(page)
    if allowed is None:
        return user_type == 'employee'
    return user_type in allowed


def can_access_page(user, page: str, overrides: Optional[dict[str, Any]] = None) -> bool:
    level = security_level(user)
    if level < page_level(page, overrides):
        return False
    if level >= SUPER_USER:
        return True
    return user_type_allows(page, getattr(user, 'role', None))


def build_menu(user, overrides: Optional[dict[str, Any]] = None) -> dict:
    """Return the visible menu grouped by section.

    Sections keep their fixed order; a page whose level is overridden is
    listed under the section of its effective level.  Empty sections are
    omitted.
    """
    sections: dict[int, list[dict]] = {lvl: [] for lvl in LEVELS}
    for lvl in LEVELS:
        for page, label in PAGES_BY_LEVEL[lvl]:
            if not can_access_page(user, page, overrides):
                continue
            effective = page_level(page, overrides)
            sections.setdefault(effective, []).append({'id': page, 'label': label})
    out = [
        {'level': lvl, 'title': LEVEL_TITLES[lvl], 'items': sections[lvl]}
        for lvl in LEVELS if sections.get(lvl)
    ]
    return {'sections': out, 'items': [item['id'] for s in out for item in s['items']]}


def validate_page_access(overrides: Any) -> dict[str, int]:
    """Normalise a pageAccess override map; raise ValueError on bad input."""
    if overrides in (None, ''):
        return {}
    if not isinstance(overrides, dict):
        raise ValueError('pageAccess harus berupa objek')
    clean: dict[str, int] = {}
    for page, level in overrides.items():
        if page not in PAGE_LEVELS:
            raise ValueError(f'Halaman tidak dikenal: {page}')
        try:
            lvl = int(level)
        except (TypeError, ValueError):
            raise ValueError(f'Level tidak valid untuk {page}')
        if lvl not in LEVELS:
            raise ValueError(f'Level tidak valid untuk {page}')
        clean[page] = lvl
    return clean
