"""
Site and page operations that touch more than one row.

Failures raise ValueError with a user facing message; views turn them
into 400 responses.
"""
import copy
import logging

from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from .models import Site, Page

logger = logging.getLogger(__name__)


def _next_page_order(site):
    last = site.pages.aggregate(last=Max('order'))['last']
    return 0 if last is None else last + 1


def check_site_limit(user):
    if Site.objects.filter(user=user).count() >= user.max_sites:
        raise ValueError(f"You have reached the maximum number of sites ({user.max_sites})")


@transaction.atomic
def create_site(user, data, home_sections=None):
    """Create a site together with its Home page."""
    check_site_limit(user)

    subdomain = data.get('subdomain')
    if subdomain and Site.objects.filter(subdomain=subdomain).exists():
        raise ValueError('Subdomain already taken')
    if not subdomain:
        data = {**data, 'subdomain': Site.generate_unique_subdomain(data.get('site_name'))}

    site = Site.objects.create(user=user, **data)
    Page.objects.create(
        site=site,
        page_name='Home',
        slug='',
        is_home=True,
        order=0,
        sections=copy.deepcopy(home_sections or []),
    )
    logger.info(f"Site '{site.subdomain}' created by {user.email}")
    return site


def publish_site(site):
    if not site.pages.exists():
        raise ValueError('Cannot publish site without pages')

    site.is_published = True
    site.published_at = timezone.now()
    site.save(update_fields=['is_published', 'published_at', 'updated_at'])
    logger.info(f"Site '{site.subdomain}' published")
    return site


def unpublish_site(site):
    site.is_published = False
    site.save(update_fields=['is_published', 'updated_at'])
    logger.info(f"Site '{site.subdomain}' unpublished")
    return site


@transaction.atomic
def duplicate_site(site, user):
    """Copy a site and all of its pages; the copy starts unpublished."""
    check_site_limit(user)

    copy_site = Site.objects.create(
        user=user,
        site_name=f"{site.site_name} (Copy)"[:100],
        subdomain=Site.generate_unique_subdomain(f"{site.subdomain}-copy"),
        description=site.description,
        favicon=site.favicon,
        logo=site.logo,
        logo_width=site.logo_width,
        theme=site.theme,
        custom_theme=copy.deepcopy(site.custom_theme),
        seo=copy.deepcopy(site.seo),
        analytics=copy.deepcopy(site.analytics),
        settings=copy.deepcopy(site.settings),
        is_published=False,
    )

    Page.objects.bulk_create([
        Page(
            site=copy_site,
            page_name=page.page_name,
            slug=page.slug,
            content=copy.deepcopy(page.content),
            sections=copy.deepcopy(page.sections),
            is_home=page.is_home,
            order=page.order,
            is_visible=page.is_visible,
            seo=copy.deepcopy(page.seo),
            settings=copy.deepcopy(page.settings),
        )
        for page in site.pages.all()
    ])
    return copy_site


@transaction.atomic
def create_page(site, data):
    """Add a page; the slug is derived from the name and made unique."""
    data = dict(data)
    is_home = data.get('is_home', False)
    slug = data.pop('slug', '') or ''

    if slug or not is_home:
        slug = Page.generate_unique_slug(site, slug or data['page_name'])
    if 'order' not in data:
        data['order'] = _next_page_order(site)

    page = Page.objects.create(site=site, slug=slug, **data)
    site.touch()
    return page


@transaction.atomic
def delete_page(page):
    """Delete a page, promoting the next page when the home page goes."""
    site = page.site
    if site.pages.count() <= 1:
        raise ValueError('Cannot delete the only page of a site')

    was_home = page.is_home
    page.delete()

    if was_home:
        successor = site.pages.order_by('order', 'created_at').first()
        successor.is_home = True
        successor.save(update_fields=['is_home', 'updated_at'])
        logger.info(f"Page '{successor.page_name}' promoted to home of '{site.subdomain}'")

    site.touch()


@transaction.atomic
def reorder_pages(site, page_orders):
    """Apply [{page_id, order}, ...] to the pages of `site`."""
    if not isinstance(page_orders, list) or not page_orders:
        raise ValueError('page_orders must be a non-empty list')

    updates = {}
    for item in page_orders:
        if not isinstance(item, dict):
            raise ValueError('Each page order must be an object')
        page_id = item.get('page_id', item.get('pageId'))
        order = item.get('order')
        try:
            updates[int(page_id)] = int(order)
        except (TypeError, ValueError):
            raise ValueError('Each page order needs a page_id and a numeric order')

    pages = {page.id: page for page in site.pages.filter(id__in=updates)}
    missing = set(updates) - set(pages)
    if missing:
        raise ValueError(f"Pages not found on this site: {sorted(missing)}")

    for page_id, order in updates.items():
        pages[page_id].order = order
    Page.objects.bulk_update(pages.values(), ['order'])
    site.touch()
    return site.pages.order_by('order', 'created_at')


@transaction.atomic
def duplicate_page(page):
    site = page.site
    new_page = Page.objects.create(
        site=site,
        page_name=f"{page.page_name} (Copy)"[:100],
        slug=Page.generate_unique_slug(site, f"{page.slug or 'home'}-copy"),
        content=copy.deepcopy(page.content),
        sections=copy.deepcopy(page.sections),
        is_home=False,
        order=_next_page_order(site),
        is_visible=page.is_visible,
        seo=copy.deepcopy(page.seo),
        settings=copy.deepcopy(page.settings),
    )
    site.touch()
    return new_page
