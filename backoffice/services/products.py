from backoffice.models import Product, FieldTripProduct

TREATMENT_CATEGORY_KEYWORDS = ('tindakan', 'treatment', 'dental', 'alat', 'bahan')
MEDICATION_CATEGORY_KEYWORDS = ('obat', 'medication', 'medicine', 'farmasi')
SHARED_CATEGORY = 'umum'

PRODUCT_FIELDS = {
    'name': 'name',
    'category': 'category',
    'price': 'price',
    'stock': 'stock',
    'minStock': 'min_stock',
    'unit': 'unit',
    'description': 'description',
    'supplier': 'supplier',
    'barcode': 'barcode',
    'status': 'status',
}

FIELD_TRIP_PRODUCT_FIELDS = {
    'name': 'name',
    'category': 'category',
    'price': 'price',
    'unit': 'unit',
    'description': 'description',
    'location': 'location',
    'duration': 'duration',
    'minParticipants': 'min_participants',
    'maxParticipants': 'max_participants',
    'ageRange': 'age_range',
    'included': 'included',
    'notIncluded': 'not_included',
    'requirements': 'requirements',
    'notes': 'notes',
    'isActive': 'is_active',
}


def format_product(p: Product) -> dict:
    return {
        'id': p.id,
        'name': p.name,
        'category': p.category,
        'price': float(p.price),
        'stock': p.stock,
        'minStock': p.min_stock,
        'unit': p.unit,
        'description': p.description,
        'supplier': p.supplier,
        'barcode': p.barcode,
        'status': p.status,
        'lowStock': p.low_stock,
        'createdAt': p.created_at.isoformat() if p.created_at else None,
    }


def format_field_trip_product(p: FieldTripProduct) -> dict:
    return {
        'id': p.id,
        'name': p.name,
        'category': p.category,
        'price': float(p.price),
        'unit': p.unit,
        'description': p.description,
        'location': p.location,
        'duration': p.duration,
        'minParticipants': p.min_participants,
        'maxParticipants': p.max_participants,
        'ageRange': p.age_range,
        'included': p.included,
        'notIncluded': p.not_included,
        'requirements': p.requirements,
        'notes': p.notes,
        'isActive': p.is_active,
        'createdAt': p.created_at.isoformat() if p.created_at else None,
    }


def _category_matches(category: str, keywords) -> bool:
    c = (category or '').lower()
    return c == SHARED_CATEGORY or any(k in c for k in keywords)


def active_products():
    return Product.objects.filter(status='aktif')


def treatment_products() -> list[Product]:
    return [p for p in active_products() if _category_matches(p.category, TREATMENT_CATEGORY_KEYWORDS)]


def medication_products() -> list[Product]:
    return [p for p in active_products() if _category_matches(p.category, MEDICATION_CATEGORY_KEYWORDS)]


def apply_fields(obj, data: dict, field_map: dict):
    for key, attr in field_map.items():
        if key in data and data[key] is not None:
            setattr(obj, attr, data[key])
    obj.save()
    return obj


def create_from(model, data: dict, field_map: dict):
    values = {attr: data[key] for key, attr in field_map.items() if data.get(key) is not None}
    return model.objects.create(**values)
