from django.db import models


class SiteTemplate(models.Model):
    """Pre-built page layouts a new site can start from"""
    CATEGORY_CHOICES = [
        ('landing', 'Landing Page'),
        ('event', 'Event'),
        ('portfolio', 'Portfolio'),
        ('business', 'Business'),
        ('blog', 'Blog'),
    ]

    name = models.CharField(max_length=200)
    slug = models.SlugField(unique=True)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='landing')
    thumbnail = models.CharField(max_length=500, blank=True)

    # Home page sections of the new site
    sections = models.JSONField(default=list)

    is_active = models.BooleanField(default=True)
    usage_count = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-usage_count', 'name']

    def __str__(self):
        return self.name
