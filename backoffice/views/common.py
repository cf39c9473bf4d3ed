from rest_framework.exceptions import NotFound


def get_or_404(model, pk, message: str = 'Data tidak ditemukan'):
    obj = model.objects.filter(pk=pk).first()
    if obj is None:
        raise NotFound(message)
    return obj


def updated_fields(validated: dict) -> list[str]:
    return sorted(k for k in validated if k != 'password')
