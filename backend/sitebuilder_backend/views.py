"""
Project-level views: health check, API root and JSON error pages.
"""
from django.http import JsonResponse
from django.utils import timezone


def health_check(request):
    """Health check endpoint"""
    return JsonResponse({
        'status': 'healthy',
        'service': 'sitebuilder-api',
        'timestamp': timezone.now().isoformat(),
    })


def api_root(request):
    return JsonResponse({
        'message': 'Website Builder API',
        'endpoints': {
            'health': '/api/health/',
            'auth': '/api/auth/',
            'oauth': '/api/oauth/',
            'sites': '/api/sites/',
            'pages': '/api/pages/',
            'themes': '/api/themes/',
            'templates': '/api/templates/',
            'assets': '/api/assets/',
            'published_sites': '/site/<subdomain>/',
        },
    })


def not_found(request, exception=None):
    return JsonResponse(
        {'success': False, 'message': f'Not found - {request.path}'},
        status=404
    )


def server_error(request):
    return JsonResponse({'success': False, 'message': 'Server Error'}, status=500)
