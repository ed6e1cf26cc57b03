"""
Tests for accounts, JWT cookies and OAuth login.

Run: python manage.py test apps.users
"""
from unittest.mock import patch

from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from .models import User
from .services import link_oauth_user

PASSWORD = 'Str0ng!Passw0rd'


class RegisterAndLoginTest(TestCase):
    """Email/password accounts."""

    def setUp(self):
        self.client = APIClient()

    def test_register_returns_tokens_and_sets_cookie(self):
        response = self.client.post('/api/auth/register/', {
            'email': 'New@Example.com',
            'password': PASSWORD,
            'password_confirm': PASSWORD,
            'first_name': 'Ada',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertEqual(response.data['user']['email'], 'new@example.com')
        self.assertEqual(response.data['user']['role'], 'user')
        self.assertTrue(response.cookies['token']['httponly'])

    def test_register_rejects_duplicate_email(self):
        User.objects.create_user(username='taken', email='taken@example.com', password=PASSWORD)

        response = self.client.post('/api/auth/register/', {
            'email': 'taken@example.com',
            'password': PASSWORD,
            'password_confirm': PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('email', response.data['errors'])

    def test_register_rejects_simple_password(self):
        response = self.client.post('/api/auth/register/', {
            'email': 'simple@example.com',
            'password': 'alllowercase',
            'password_confirm': 'alllowercase',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_with_email(self):
        User.objects.create_user(username='ada', email='ada@example.com', password=PASSWORD)

        response = self.client.post('/api/auth/login/', {
            'email': 'ada@example.com',
            'password': PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['username'], 'ada')
        self.assertIn('token', response.cookies)
        self.assertIn('refresh_token', response.cookies)

    def test_login_inactive_user_is_unauthorized(self):
        User.objects.create_user(
            username='gone', email='gone@example.com', password=PASSWORD, is_active=False
        )

        response = self.client.post('/api/auth/login/', {
            'email': 'gone@example.com',
            'password': PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])


class CookieAuthenticationTest(TestCase):
    """The access token is accepted from the header or the cookie."""

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username='ada', email='ada@example.com', password=PASSWORD)
        login = self.client.post('/api/auth/login/', {
            'email': 'ada@example.com',
            'password': PASSWORD,
        }, format='json')
        self.access = login.data['access']
        self.client.cookies.clear()

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['success'], False)

    def test_bearer_header(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {self.access}')
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'ada@example.com')

    def test_token_cookie(self):
        self.client.cookies['token'] = self.access
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_invalid_cookie_is_treated_as_anonymous(self):
        self.client.cookies['token'] = 'not-a-jwt'
        response = self.client.get('/api/themes/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_invalid_header_is_rejected(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-jwt')
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_clears_cookies(self):
        response = self.client.post('/api/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies['token'].value, '')


class TokenRefreshTest(TestCase):
    """Refresh tokens rotate and the used one is blacklisted."""

    def setUp(self):
        self.client = APIClient()
        User.objects.create_user(username='ada', email='ada@example.com', password=PASSWORD)
        login = self.client.post('/api/auth/login/', {
            'email': 'ada@example.com',
            'password': PASSWORD,
        }, format='json')
        self.refresh = login.data['refresh']
        self.client.cookies.clear()

    def test_refresh_from_body_rotates_token(self):
        response = self.client.post('/api/auth/refresh/', {'refresh': self.refresh}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertNotEqual(response.data['refresh'], self.refresh)
        self.assertEqual(response.cookies['token'].value, response.data['access'])
        self.assertEqual(response.cookies['refresh_token'].value, response.data['refresh'])

    def test_refresh_from_cookie(self):
        self.client.cookies['refresh_token'] = self.refresh

        response = self.client.post('/api/auth/refresh/', {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_rotated_token_cannot_be_reused(self):
        first = self.client.post('/api/auth/refresh/', {'refresh': self.refresh}, format='json')
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.client.cookies.clear()

        response = self.client.post('/api/auth/refresh/', {'refresh': self.refresh}, format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])

    def test_missing_refresh_token(self):
        response = self.client.post('/api/auth/refresh/', {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Refresh token is required')


class ProfileTest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username='ada', email='ada@example.com', password=PASSWORD)
        self.client.force_authenticate(user=self.user)

    def test_update_profile_ignores_role(self):
        response = self.client.patch('/api/auth/profile/', {
            'first_name': 'Ada',
            'role': 'super_admin',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.first_name, 'Ada')
        self.assertEqual(self.user.role, 'user')

    def test_change_password(self):
        response = self.client.put('/api/auth/change-password/', {
            'old_password': PASSWORD,
            'new_password': 'N3w!Password#2',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('N3w!Password#2'))

    def test_change_password_wrong_old_password(self):
        response = self.client.put('/api/auth/change-password/', {
            'old_password': 'wrong',
            'new_password': 'N3w!Password#2',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_user_list_requires_admin_role(self):
        response = self.client.get('/api/auth/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.user.role = 'admin'
        self.user.save()
        response = self.client.get('/api/auth/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 1)


class OAuthLoginTest(TestCase):
    """Only administrators may sign in through the identity provider."""

    def setUp(self):
        self.client = APIClient()

    def test_non_admin_role_is_denied(self):
        response = self.client.post('/api/auth/oauth-login/', {
            'userInfo': {'uid': 'u-1', 'email': 'student@example.com', 'role': 'user'},
            'accessToken': 'idp-token',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error'], 'access_denied')
        self.assertEqual(response.data['role'], 'user')
        self.assertFalse(User.objects.filter(email='student@example.com').exists())

    def test_missing_role_is_denied(self):
        response = self.client.post('/api/auth/oauth-login/', {
            'userInfo': {'uid': 'u-2', 'email': 'norole@example.com'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_missing_uid(self):
        response = self.client.post('/api/auth/oauth-login/', {
            'userInfo': {'email': 'x@example.com', 'role': 'admin'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'User info with uid is required')

    def test_admin_is_created_and_signed_in(self):
        response = self.client.post('/api/auth/oauth-login/', {
            'userInfo': {
                'uid': 'u-3',
                'email': 'Admin@Example.com',
                'first_name': 'Grace',
                'role': 'admin',
            },
            'accessToken': 'idp-token',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['created'])
        user = User.objects.get(oauth_uid='u-3')
        self.assertEqual(user.email, 'admin@example.com')
        self.assertEqual(user.role, 'admin')
        self.assertEqual(user.oauth_access_token, 'idp-token')
        self.assertIn('token', response.cookies)

    def test_existing_email_account_is_linked(self):
        existing = User.objects.create_user(username='grace', email='grace@example.com', password=PASSWORD)

        response = self.client.post('/api/auth/oauth-login/', {
            'userInfo': {'uid': 'u-4', 'email': 'grace@example.com', 'role': 'super_admin'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        existing.refresh_from_db()
        self.assertEqual(existing.oauth_uid, 'u-4')
        self.assertEqual(existing.role, 'super_admin')
        self.assertEqual(User.objects.count(), 1)

    def test_profile_names_win_over_user_info(self):
        response = self.client.post('/api/auth/oauth-login/', {
            'userInfo': {'uid': 'u-5', 'email': 'ada@example.com', 'first_name': 'A', 'role': 'admin'},
            'userProfile': {'first_name': 'Ada', 'last_name': 'Lovelace'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['first_name'], 'Ada')
        user = User.objects.get(oauth_uid='u-5')
        self.assertEqual((user.first_name, user.last_name), ('Ada', 'Lovelace'))


class LinkOAuthUserTest(TestCase):

    def test_lookup_by_uid_wins_over_email(self):
        linked, _ = link_oauth_user({'uid': '42', 'email': 'first@example.com'})
        again, created = link_oauth_user({'uid': '42', 'email': 'changed@example.com'})

        self.assertFalse(created)
        self.assertEqual(linked.pk, again.pk)

    def test_usernames_stay_unique(self):
        User.objects.create_user(username='sam', email='sam@other.com', password=PASSWORD)
        user, created = link_oauth_user({'uid': '7', 'email': 'sam@example.com'})

        self.assertTrue(created)
        self.assertEqual(user.username, 'sam1')
        self.assertFalse(user.has_usable_password())

    @patch('apps.users.services.logger')
    def test_linking_is_logged(self, mock_logger):
        link_oauth_user({'uid': '9', 'email': 'log@example.com'})
        self.assertTrue(mock_logger.info.called)


class ErrorResponseTest(TestCase):
    """Failures share the {success, message} body."""

    def setUp(self):
        self.client = APIClient()

    def test_validation_errors_are_listed_per_field(self):
        response = self.client.post('/api/auth/register/', {
            'email': 'not-an-email',
            'password': PASSWORD,
            'password_confirm': PASSWORD,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('email', response.data['errors'])
        self.assertEqual(response.data['message'], f"email: {response.data['errors']['email'][0]}")

    def test_unknown_url_returns_json_404(self):
        response = self.client.get('/nowhere/')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.json(), {'success': False, 'message': 'Not found - /nowhere/'})
