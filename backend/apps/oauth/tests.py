"""
Tests for the identity provider proxy.

Run: python manage.py test apps.oauth
"""
from unittest.mock import patch, Mock

import requests
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.users.models import User
from .client import IdentityProviderClient, IdentityProviderError


def upstream(status_code=200, data=None):
    response = Mock(status_code=status_code)
    response.json.return_value = data if data is not None else {}
    return response


class IdentityProviderClientTest(TestCase):

    @patch('apps.oauth.client.requests.post')
    def test_exchange_code_posts_client_id(self, mock_post):
        mock_post.return_value = upstream(data={'access_token': 'abc'})

        data = IdentityProviderClient().exchange_code('the-code', 'the-state')

        self.assertEqual(data, {'access_token': 'abc'})
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://idp.test/backend/tokengen')
        self.assertEqual(kwargs['json'], {'code': 'the-code', 'state': 'the-state', 'client_id': 'test-client'})
        self.assertEqual(kwargs['timeout'], 15)

    @patch('apps.oauth.client.requests.post')
    def test_bearer_header(self, mock_post):
        mock_post.return_value = upstream(data={'uid': 'u1'})

        IdentityProviderClient().get_user_info('tok', 'u1')

        self.assertEqual(mock_post.call_args.kwargs['headers']['Authorization'], 'Bearer tok')
        self.assertEqual(mock_post.call_args.kwargs['json'], {'uid': 'u1'})

    @patch('apps.oauth.client.requests.post')
    def test_upstream_error(self, mock_post):
        mock_post.return_value = upstream(401, {'error': 'invalid_token'})

        with self.assertRaises(IdentityProviderError) as ctx:
            IdentityProviderClient().get_profile('tok', 'u1')

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.details, {'error': 'invalid_token'})

    @patch('apps.oauth.client.requests.post')
    def test_network_failure_is_502(self, mock_post):
        mock_post.side_effect = requests.ConnectionError('connection refused')

        with self.assertRaises(IdentityProviderError) as ctx:
            IdentityProviderClient().logout('u1')

        self.assertEqual(ctx.exception.status_code, 502)
        self.assertIn('connection refused', ctx.exception.details)


class ProxyViewTest(TestCase):

    def setUp(self):
        self.client = APIClient()

    @patch('apps.oauth.client.requests.post')
    def test_token(self, mock_post):
        mock_post.return_value = upstream(data={'access_token': 'abc', 'uid': 'u1'})

        response = self.client.post('/api/oauth/token/', {'code': 'c', 'state': 's'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'access_token': 'abc', 'uid': 'u1'})

    def test_token_requires_code(self):
        response = self.client.post('/api/oauth/token/', {'state': 's'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @patch('apps.oauth.client.requests.post')
    def test_token_failure_shape(self, mock_post):
        mock_post.return_value = upstream(400, {'error': 'invalid_code'})

        response = self.client.post('/api/oauth/token/', {'code': 'bad'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Token generation failed', 'details': {'error': 'invalid_code'}})

    @patch('apps.oauth.client.requests.post')
    def test_unreachable_upstream(self, mock_post):
        mock_post.side_effect = requests.Timeout()

        response = self.client.post('/api/oauth/userinfo/', {'access_token': 't', 'uid': 'u1'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['error'], 'User info fetch failed')

    @patch('apps.oauth.client.requests.post')
    def test_profile_not_found(self, mock_post):
        mock_post.return_value = upstream(404, {'detail': 'missing'})

        response = self.client.post('/api/oauth/profile/', {'access_token': 't', 'uid': 'u1'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Profile not found'})

    @patch('apps.oauth.client.requests.post')
    def test_update_profile_defaults_mode(self, mock_post):
        mock_post.return_value = upstream(data={'status': 1})

        response = self.client.post('/api/oauth/update-profile/', {
            'uid': 'u1', 'first_name': 'Ada', 'last_name': 'L', 'email': 'ada@example.com', 'mobileno': '123',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_post.call_args.kwargs['json']['mode'], 'ivp')
        self.assertTrue(mock_post.call_args.args[0].endswith('/updateuserbyid'))

    def test_logout_requires_user_id(self):
        response = self.client.post('/api/oauth/logout/', {}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'status': 0, 'error': 'Missing user_id', 'status_code': 400})

    @patch('apps.oauth.client.requests.post')
    def test_logout(self, mock_post):
        mock_post.return_value = upstream(data={'message': 'Bye'})

        response = self.client.post('/api/oauth/logout/', {'user_id': 'u1'}, format='json')

        self.assertEqual(response.data, {'status': 1, 'message': 'Bye', 'status_code': 200})

    @patch('apps.oauth.client.requests.post')
    def test_logout_invalid_grant_passes_through(self, mock_post):
        mock_post.return_value = upstream(400, {'status': 0, 'errors': 'invalid_grant'})

        response = self.client.post('/api/oauth/logout/', {'user_id': 'u1'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'status': 0, 'errors': 'invalid_grant'})

    @patch('apps.oauth.client.requests.post')
    def test_logout_failure(self, mock_post):
        mock_post.return_value = upstream(500, {'message': 'boom'})

        response = self.client.post('/api/oauth/logout/', {'user_id': 'u1'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['error'], 'Logout failed')
        self.assertEqual(response.data['status_code'], 500)


class LocalAccountTest(TestCase):

    def setUp(self):
        self.client = APIClient()

    def test_sync_creates_user(self):
        response = self.client.post('/api/oauth/sync-user/', {
            'userInfo': {'uid': 'u-1', 'email': 'New@Example.com', 'first_name': 'New', 'role': 'admin'},
            'accessToken': 'tok',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['created'])
        user = User.objects.get(oauth_uid='u-1')
        self.assertEqual(user.email, 'new@example.com')
        self.assertEqual(user.oauth_provider, 'ivp')
        self.assertEqual(user.oauth_access_token, 'tok')
        self.assertEqual(user.role, 'user')
        self.assertFalse(user.has_usable_password())

    def test_sync_links_existing_email(self):
        existing = User.objects.create_user(username='old', email='old@example.com', password='x')

        response = self.client.post('/api/oauth/sync-user/', {
            'uid': 'u-2', 'email': 'old@example.com',
        }, format='json')

        self.assertFalse(response.data['created'])
        existing.refresh_from_db()
        self.assertEqual(existing.oauth_uid, 'u-2')
        self.assertTrue(existing.has_usable_password())

    def test_sync_requires_uid_and_email(self):
        response = self.client.post('/api/oauth/sync-user/', {'userInfo': {'uid': 'u-3'}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_get_user_by_uid(self):
        User.objects.create_user(username='linked', email='linked@example.com', password='x',
                                 oauth_provider='ivp', oauth_uid='u-4')

        response = self.client.get('/api/oauth/user/u-4/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['email'], 'linked@example.com')

        response = self.client.get('/api/oauth/user/nobody/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'User not found')

    def test_disconnect(self):
        user = User.objects.create_user(username='linked', email='linked@example.com', password='x',
                                        oauth_provider='ivp', oauth_uid='u-5', oauth_access_token='tok')
        self.client.force_authenticate(user=user)

        response = self.client.post('/api/oauth/disconnect/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        user.refresh_from_db()
        self.assertEqual(user.oauth_provider, '')
        self.assertIsNone(user.oauth_uid)

        response = self.client.post('/api/oauth/disconnect/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_disconnect_requires_auth(self):
        response = self.client.post('/api/oauth/disconnect/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
