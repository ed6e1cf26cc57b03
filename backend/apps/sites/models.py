import re

from django.conf import settings
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models, transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.text import slugify

SUBDOMAIN_VALIDATORS = [
    MinLengthValidator(3, 'Subdomain must be at least 3 characters'),
    RegexValidator(
        r'^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$',
        'Subdomain can only contain lowercase letters, numbers, and hyphens',
    ),
]

LOGO_WIDTH_VALIDATOR = RegexValidator(
    r'^\d+(\.\d+)?(px|%|rem|em|vw)$',
    'Logo width must be a CSS length such as 120px',
)

PAGE_SLUG_VALIDATOR = RegexValidator(
    r'^[a-z0-9-/]*$',
    'Slug can only contain lowercase letters, numbers, hyphens, and slashes',
)


def default_custom_theme():
    return {
        'colors': {
            'primary': '#3b82f6',
            'secondary': '#8b5cf6',
            'background': '#ffffff',
            'text': '#1f2937',
            'accent': '#f59e0b',
        },
        'fonts': {'heading': 'Inter', 'body': 'Inter'},
        'customCSS': '',
    }


def default_seo():
    return {'title': '', 'description': '', 'keywords': [], 'ogImage': ''}


def default_analytics():
    return {'googleAnalyticsId': '', 'facebookPixelId': ''}


def default_site_settings():
    return {'favicon': '', 'language': 'en', 'timezone': 'UTC'}


def default_page_settings():
    return {'showInNavbar': True, 'requireAuth': False, 'customCss': '', 'customJs': ''}


class Site(models.Model):
    """A user's website, published at its subdomain"""
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='sites')
    site_name = models.CharField(max_length=100, validators=[MinLengthValidator(2)])
    subdomain = models.CharField(max_length=50, unique=True, validators=SUBDOMAIN_VALIDATORS)
    custom_domain = models.CharField(
        max_length=253, unique=True, null=True, blank=True,
        error_messages={'unique': 'Custom domain already in use'}
    )
    description = models.CharField(max_length=500, blank=True)
    favicon = models.CharField(max_length=500, blank=True)
    logo = models.CharField(max_length=500, blank=True)
    logo_width = models.CharField(max_length=20, default='120px', validators=[LOGO_WIDTH_VALIDATOR])

    theme = models.ForeignKey(
        'themes.Theme',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='sites'
    )
    custom_theme = models.JSONField(default=default_custom_theme, blank=True)
    seo = models.JSONField(default=default_seo, blank=True)
    analytics = models.JSONField(default=default_analytics, blank=True)
    settings = models.JSONField(default=default_site_settings, blank=True)

    is_published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True)
    last_edited_at = models.DateTimeField(default=timezone.now)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-updated_at']
        indexes = [
            models.Index(fields=['user', 'is_published'], name='site_user_published_idx'),
        ]

    def __str__(self):
        return f"{self.site_name} ({self.subdomain})"

    @classmethod
    def generate_unique_subdomain(cls, base, exclude_pk=None):
        """Slugify `base` and append -1, -2, ... until it is free."""
        base = slugify(base or '').replace('_', '-')[:46].strip('-') or 'site'
        if len(base) < 3:
            base = f"{base}-site"

        subdomain = base
        counter = 1
        while cls.objects.filter(subdomain=subdomain).exclude(pk=exclude_pk).exists():
            subdomain = f"{base}-{counter}"
            counter += 1
        return subdomain

    def touch(self):
        """Record an edit without rewriting the whole row."""
        self.last_edited_at = timezone.now()
        Site.objects.filter(pk=self.pk).update(last_edited_at=self.last_edited_at)

    def get_home_page(self):
        return self.pages.filter(is_home=True).first() or self.pages.order_by('order', 'created_at').first()


class Page(models.Model):
    """A page of a site, made of ordered sections"""
    site = models.ForeignKey(Site, on_delete=models.CASCADE, related_name='pages')
    page_name = models.CharField(max_length=100)
    slug = models.CharField(max_length=200, blank=True, validators=[PAGE_SLUG_VALIDATOR])

    # Legacy flat component list, superseded by sections
    content = models.JSONField(default=list, blank=True)
    sections = models.JSONField(default=list, blank=True)

    is_home = models.BooleanField(default=False)
    order = models.IntegerField(default=0)
    is_visible = models.BooleanField(default=True)
    seo = models.JSONField(default=default_seo, blank=True)
    settings = models.JSONField(default=default_page_settings, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['order', 'created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['site', 'slug'],
                condition=~Q(slug=''),
                name='unique_page_slug_per_site',
            ),
        ]
        indexes = [
            models.Index(fields=['site', 'order'], name='page_site_order_idx'),
        ]

    def __str__(self):
        return f"{self.page_name} ({self.site.subdomain}/{self.slug})"

    def save(self, *args, **kwargs):
        self.slug = (self.slug or '').strip()
        if self.slug == '/':
            self.slug = ''

        # At most one home page per site
        with transaction.atomic():
            if self.is_home:
                Page.objects.filter(site_id=self.site_id, is_home=True).exclude(pk=self.pk).update(is_home=False)
            super().save(*args, **kwargs)

    @classmethod
    def generate_unique_slug(cls, site, base, exclude_pk=None):
        """Keep an already valid slug (nested ones included), slugify anything else."""
        candidate = (base or '').strip().lower().strip('/')
        if not re.fullmatch(r'[a-z0-9-/]+', candidate):
            candidate = slugify(candidate).replace('_', '-')
        base = candidate[:190] or 'page'
        slug = base
        counter = 1
        while cls.objects.filter(site=site, slug=slug).exclude(pk=exclude_pk).exists():
            slug = f"{base}-{counter}"
            counter += 1
        return slug
