"""
Account linking for users coming from the external identity provider.
"""
import logging

from django.conf import settings
from django.db import transaction

from .models import User

logger = logging.getLogger(__name__)


def _profile_fields(user_info: dict, profile: dict = None) -> dict:
    fields = {}
    profile = profile if isinstance(profile, dict) else {}
    for key in ('first_name', 'last_name'):
        value = profile.get(key) or user_info.get(key)
        if value:
            fields[key] = str(value)[:150]
    avatar = user_info.get('avatar') or user_info.get('picture')
    if avatar:
        fields['avatar'] = str(avatar)[:500]
    role = user_info.get('role')
    if role in dict(User.ROLE_CHOICES):
        fields['role'] = role
    return fields


@transaction.atomic
def link_oauth_user(user_info: dict, access_token: str = '', provider: str = None,
                    profile: dict = None):
    """
    Find or create the local user for an identity provider profile.

    Lookup order: linked (provider, uid), then an existing account with
    the same email which gets converted to a linked one, then a new user.
    Names from `profile` (the provider's profile record) win over the
    ones in `user_info`. Returns (user, created).
    """
    provider = provider or settings.OAUTH_PROVIDER_NAME
    uid = str(user_info['uid'])
    email = (user_info.get('email') or '').strip().lower()

    user = User.objects.filter(oauth_provider=provider, oauth_uid=uid).first()
    if user is None and email:
        user = User.objects.filter(email__iexact=email).first()
        if user is not None:
            logger.info(f"Linking existing account {user.email} to {provider} uid {uid}")

    created = False
    if user is None:
        if not email:
            email = f"{uid}@{provider}.oauth.local"
        user = User(
            email=email,
            username=User.generate_unique_username(user_info.get('username') or email),
            is_email_verified=True,
        )
        user.set_unusable_password()
        created = True
        logger.info(f"Creating user {email} from {provider} uid {uid}")

    user.oauth_provider = provider
    user.oauth_uid = uid
    if access_token:
        user.oauth_access_token = access_token
    for field, value in _profile_fields(user_info, profile).items():
        setattr(user, field, value)
    user.save()

    return user, created
