import logging

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods

logger = logging.getLogger(__name__)


@csrf_exempt
@require_http_methods(["GET"])
def health_check(request):
    """Health check endpoint for deployment verification"""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        database = 'ok'
    except DatabaseError as e:
        logger.error(f"Health check database error: {e}")
        database = 'unavailable'

    healthy = database == 'ok'
    return JsonResponse({
        'status': 'healthy' if healthy else 'degraded',
        'message': 'Backend is running successfully' if healthy else 'Database is unreachable',
        'version': settings.SYSTEM_INFO['version'],
        'environment': settings.ENVIRONMENT,
        'database': database,
    }, status=200 if healthy else 503)
