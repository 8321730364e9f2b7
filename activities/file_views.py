# activities/file_views.py
import logging
import mimetypes
import posixpath
from urllib.parse import urlparse

import requests
from django.conf import settings
from django.http import HttpResponse
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)

FALLBACK_CONTENT_TYPES = {
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
}


def is_allowed_host(url):
    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.hostname:
        return False
    host = parsed.hostname.lower()
    return any(
        host == allowed or host.endswith(f'.{allowed}')
        for allowed in settings.REMOTE_PROOF_HOSTS
    )


def guess_content_type(url):
    path = urlparse(url).path
    extension = posixpath.splitext(path)[1].lower()
    if extension in FALLBACK_CONTENT_TYPES:
        return FALLBACK_CONTENT_TYPES[extension]
    return mimetypes.guess_type(path)[0] or 'application/octet-stream'


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def view_file(request):
    """
    Proxy a remotely stored proof document so browsers display it inline.

    Only hosts listed in REMOTE_PROOF_HOSTS are fetched.
    """
    url = request.query_params.get('url')
    if not url:
        return Response({
            'success': False,
            'message': 'File URL is required'
        }, status=status.HTTP_400_BAD_REQUEST)

    if not is_allowed_host(url):
        logger.warning(f"Rejected file proxy request for {url}")
        return Response({
            'success': False,
            'message': 'Invalid file URL'
        }, status=status.HTTP_403_FORBIDDEN)

    try:
        upstream = requests.get(url, timeout=settings.FILE_PROXY_TIMEOUT)
        upstream.raise_for_status()
    except requests.HTTPError as e:
        logger.error(f"File proxy upstream error for {url}: {e}")
        return Response({
            'success': False,
            'message': 'Failed to fetch file from storage',
            'details': e.response.reason,
        }, status=e.response.status_code)
    except requests.RequestException as e:
        logger.error(f"File proxy request failed for {url}: {e}")
        return Response({
            'success': False,
            'message': 'Failed to load file',
            'details': str(e),
        }, status=status.HTTP_502_BAD_GATEWAY)

    filename = posixpath.basename(urlparse(url).path) or 'document'
    content_type = upstream.headers.get('Content-Type') or guess_content_type(url)

    response = HttpResponse(upstream.content, content_type=content_type)
    response['Content-Disposition'] = f'inline; filename="{filename}"'
    response['Cache-Control'] = 'public, max-age=31536000'
    logger.info(f"Proxied file {filename}")
    return response
