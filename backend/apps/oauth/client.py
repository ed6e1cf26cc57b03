"""
HTTP client for the IVP/ISEA identity provider.

Every call is a JSON POST against OAUTH_BASE_URL. Failures surface as
IdentityProviderError carrying the upstream status and body so the proxy
views can relay them.
"""
import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """Upstream returned a non-2xx response, or could not be reached (502)."""

    def __init__(self, status_code, details):
        super().__init__(f"Identity provider error {status_code}: {details}")
        self.status_code = status_code
        self.details = details


class IdentityProviderClient:

    def __init__(self, base_url=None, client_id=None, timeout=None):
        self.base_url = (base_url or settings.OAUTH_BASE_URL).rstrip('/')
        self.client_id = client_id or settings.OAUTH_CLIENT_ID
        self.timeout = timeout or settings.OAUTH_TIMEOUT

    @staticmethod
    def _parse(response):
        try:
            return response.json()
        except ValueError:
            return response.text

    def _post(self, path, payload, access_token=None):
        url = f"{self.base_url}{path}"
        headers = {'Content-Type': 'application/json'}
        if access_token:
            headers['Authorization'] = f'Bearer {access_token}'

        try:
            response = requests.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.Timeout:
            logger.error(f"Identity provider timed out: POST {url}")
            raise IdentityProviderError(502, 'Request timed out')
        except requests.RequestException as e:
            logger.error(f"Identity provider unreachable: POST {url}: {e}")
            raise IdentityProviderError(502, str(e))

        data = self._parse(response)
        if not 200 <= response.status_code < 300:
            logger.warning(f"Identity provider returned {response.status_code} for POST {path}: {data}")
            raise IdentityProviderError(response.status_code, data)
        return data

    def exchange_code(self, code, state, client_id=None):
        """Trade an authorization code for tokens."""
        return self._post('/tokengen', {
            'code': code,
            'state': state,
            'client_id': client_id or self.client_id,
        })

    def get_user_info(self, access_token, uid):
        return self._post('/userinfo', {'uid': uid}, access_token=access_token)

    def get_profile(self, access_token, uid):
        return self._post('/ivp/profile/', {'uid': uid}, access_token=access_token)

    def update_profile(self, uid, first_name=None, last_name=None, email=None, mobileno=None, mode=None):
        return self._post('/updateuserbyid', {
            'first_name': first_name,
            'last_name': last_name,
            'email': email,
            'mobileno': mobileno,
            'uid': uid,
            'mode': mode or 'ivp',
        })

    def logout(self, user_id):
        return self._post('/logout', {'user_id': user_id})
