import logging

from django.http import Http404
from django.shortcuts import get_object_or_404, render
from django.utils import timezone
from django.utils.safestring import mark_safe
from django.views.decorators.http import require_safe

from apps.sites.models import Site
from .components import (
    RenderContext, resolve_theme, google_fonts_url, render_sections,
    render_legacy_content, sanitize_url, font_stack,
)

logger = logging.getLogger(__name__)


def safe_css(css):
    """Custom CSS goes inside a <style> element; it must not close it."""
    if not isinstance(css, str) or not css.strip():
        return ''
    return mark_safe(css.replace('</', '<\\/'))


def pick_page(pages, slug):
    slug = (slug or '').strip('/').lower()
    if slug:
        return next((page for page in pages if page.slug == slug), None)
    return next((page for page in pages if page.is_home), None) or (pages[0] if pages else None)


def navigation(pages, current, ctx):
    items = []
    for page in pages:
        if (page.settings or {}).get('showInNavbar') is False:
            continue
        items.append({
            'label': page.page_name,
            'url': ctx.page_url('' if page.is_home else page.slug),
            'active': page.pk == current.pk,
        })
    for section in current.sections or []:
        if isinstance(section, dict) and section.get('showInNavbar') and section.get('sectionName'):
            items.append({'label': section['sectionName'], 'url': f"#{section.get('id', '')}", 'active': False})
    return items


@require_safe
def site_page(request, subdomain, slug=''):
    """Render a page of a published site."""
    site = get_object_or_404(
        Site.objects.select_related('theme'),
        subdomain=subdomain.lower(),
        is_published=True,
    )
    pages = list(site.pages.filter(is_visible=True).order_by('order', 'created_at'))
    page = pick_page(pages, slug)
    if page is None:
        raise Http404('Page not found')

    colors, fonts = resolve_theme(site)
    base_path = '' if getattr(request, 'site_host', False) else f"/site/{site.subdomain}"
    ctx = RenderContext(colors=colors, fonts=fonts, base_path=base_path, now=timezone.now())

    if page.sections:
        body = render_sections(page.sections, ctx)
    elif page.content:
        body = render_legacy_content(page.content, ctx)
    else:
        body = ''

    seo = {**(site.seo or {}), **{k: v for k, v in (page.seo or {}).items() if v}}
    custom_theme = site.custom_theme if isinstance(site.custom_theme, dict) else {}
    page_settings = page.settings or {}

    logger.debug(f"Rendering {site.subdomain}/{page.slug or '<home>'}")
    return render(request, 'renderer/page.html', {
        'site': site,
        'page': page,
        'title': seo.get('title') or f"{page.page_name} | {site.site_name}",
        'description': seo.get('description') or site.description,
        'favicon': sanitize_url(site.favicon or (site.settings or {}).get('favicon')),
        'logo': sanitize_url(site.logo),
        'colors': {name: ctx.color(name) for name in ('background', 'text', 'primary', 'secondary')},
        'heading_font': mark_safe(font_stack(fonts.get('heading'))),
        'body_font': mark_safe(font_stack(fonts.get('body'))),
        'fonts_url': google_fonts_url(fonts),
        'home_url': ctx.page_url(''),
        'nav_items': navigation(pages, page, ctx),
        'body': body,
        'site_css': safe_css(custom_theme.get('customCSS')),
        'page_css': safe_css(page_settings.get('customCss')),
    })
