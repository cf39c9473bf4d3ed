from django.http import JsonResponse


class RetiredEndpointMiddleware:
    """Return 410 for the paths of the old hosted backend."""
    LEGACY_PREFIXES = ('/make-server-', '/functions/v1/')

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path or ''
        if any(path.startswith(p) for p in self.LEGACY_PREFIXES):
            return JsonResponse(
                {'ok': False, 'error': {'code': 'deprecated', 'message': 'Endpoint ini sudah tidak dipakai. Gunakan /api/* .'}},
                status=410
            )
        return self.get_response(request)
