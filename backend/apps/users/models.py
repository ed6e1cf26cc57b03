from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import Q


def default_storage_limit():
    return settings.DEFAULT_STORAGE_LIMIT


def default_max_sites():
    return settings.MAX_SITES_PER_USER


class User(AbstractUser):
    """Custom User model, logs in with email"""
    ROLE_CHOICES = [
        ('user', 'User'),
        ('admin', 'Admin'),
        ('super_admin', 'Super Admin'),
    ]
    ADMIN_ROLES = ('admin', 'super_admin')

    PLAN_CHOICES = [
        ('free', 'Free'),
        ('pro', 'Pro'),
        ('enterprise', 'Enterprise'),
    ]

    email = models.EmailField(unique=True)
    bio = models.TextField(blank=True)
    avatar = models.CharField(max_length=500, blank=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='user')

    # Linked identity at the external OAuth provider
    oauth_provider = models.CharField(max_length=50, blank=True)
    oauth_uid = models.CharField(max_length=255, null=True, blank=True)
    oauth_access_token = models.TextField(blank=True)

    subscription_plan = models.CharField(max_length=20, choices=PLAN_CHOICES, default='free')
    storage_used = models.BigIntegerField(default=0)
    storage_limit = models.BigIntegerField(default=default_storage_limit)
    max_sites = models.IntegerField(default=default_max_sites)
    is_email_verified = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['oauth_provider', 'oauth_uid'],
                condition=Q(oauth_uid__isnull=False),
                name='unique_oauth_identity',
            ),
        ]

    def __str__(self):
        return self.email

    @property
    def name(self):
        return self.get_full_name() or self.username

    @property
    def is_admin_role(self):
        return self.role in self.ADMIN_ROLES

    @property
    def storage_available(self):
        return max(self.storage_limit - self.storage_used, 0)

    @classmethod
    def generate_unique_username(cls, base):
        """Make a username from `base` that is not taken yet."""
        base = (base or 'user').split('@')[0][:140] or 'user'
        username = base
        counter = 1
        while cls.objects.filter(username=username).exists():
            username = f"{base}{counter}"
            counter += 1
        return username
