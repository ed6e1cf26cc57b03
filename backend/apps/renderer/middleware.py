import logging

from django.conf import settings
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

# Hosts under the base domain that never belong to a user site
RESERVED_SUBDOMAINS = {'www', 'api', 'admin', 'app'}

# Paths that keep their normal routing on a site host
PASSTHROUGH_PREFIXES = ('/api/', '/admin/', '/uploads/', '/static/')


def subdomain_for_host(host):
    """'demo.example.com' -> 'demo' when SITE_SUBDOMAIN_BASE is example.com."""
    base = (settings.SITE_SUBDOMAIN_BASE or '').lower().strip('.')
    host = host.split(':', 1)[0].lower().rstrip('.')
    if not base or not host.endswith(f".{base}"):
        return None
    subdomain = host[:-len(base) - 1]
    if not subdomain or '.' in subdomain or subdomain in RESERVED_SUBDOMAINS:
        return None
    return subdomain


class SubdomainSiteMiddleware(MiddlewareMixin):
    """
    Serves published sites at <subdomain>.<SITE_SUBDOMAIN_BASE>.

    Requests on such a host go straight to the site renderer with the
    path as the page slug, so /about/ on demo.example.com renders the
    same page as /site/demo/about/.
    """

    def process_request(self, request):
        subdomain = subdomain_for_host(request.get_host())
        if subdomain is None or request.path_info.startswith(PASSTHROUGH_PREFIXES):
            return None

        from .views import site_page

        request.site_host = True
        return site_page(request, subdomain, request.path_info.strip('/'))
