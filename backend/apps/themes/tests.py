"""
Tests for the theme catalogue.

Run: python manage.py test apps.themes
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.users.models import User
from .models import Theme


class ThemeCatalogueTest(TestCase):
    """Browsing and filtering the public catalogue."""

    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(username='owner', email='owner@example.com', password='x')
        self.private = Theme.objects.create(name='Secret Sauce', category='bold', is_public=False, created_by=self.owner)

    def test_presets_are_seeded(self):
        self.assertTrue(Theme.objects.filter(name='Modern Blue', created_by=None).exists())
        self.assertTrue(Theme.objects.filter(name='Dark Elegance', category='dark').exists())

    def test_list_is_public_and_hides_private_themes(self):
        response = self.client.get('/api/themes/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        names = [theme['name'] for theme in response.data['results']]
        self.assertIn('Modern Blue', names)
        self.assertNotIn('Secret Sauce', names)
        self.assertNotIn('custom_css', response.data['results'][0])

    def test_list_is_ordered_by_usage(self):
        Theme.objects.filter(name='Minimal White').update(usage_count=50)

        response = self.client.get('/api/themes/')

        self.assertEqual(response.data['results'][0]['name'], 'Minimal White')

    def test_filter_by_category_and_search(self):
        response = self.client.get('/api/themes/', {'category': 'dark'})
        self.assertTrue(all(t['category'] == 'dark' for t in response.data['results']))

        response = self.client.get('/api/themes/', {'search': 'ocean'})
        self.assertEqual([t['name'] for t in response.data['results']], ['Ocean Breeze'])

    def test_category_route(self):
        response = self.client.get('/api/themes/category/minimal/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['results'][0]['name'], 'Minimal White')

        response = self.client.get('/api/themes/category/neon/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_private_theme_is_hidden_from_others(self):
        stranger = User.objects.create_user(username='stranger', email='stranger@example.com', password='x')
        self.client.force_authenticate(user=stranger)

        response = self.client.get(f'/api/themes/{self.private.id}/')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Not authorized to access this theme')

    def test_private_theme_visible_to_creator(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.get(f'/api/themes/{self.private.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('custom_css', response.data)

    def test_use_increments_usage_count(self):
        theme = Theme.objects.get(name='Modern Blue')

        response = self.client.post(f'/api/themes/{theme.id}/use/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['usage_count'], theme.usage_count + 1)


class ThemeAuthoringTest(TestCase):
    """Creating, updating and deleting themes."""

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username='designer', email='designer@example.com', password='x')
        self.client.force_authenticate(user=self.user)

    def test_create_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post('/api/themes/', {'name': 'Nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_fills_defaults_and_sets_creator(self):
        response = self.client.post('/api/themes/', {
            'name': 'Forest',
            'category': 'custom',
            'colors': {'primary': '#228b22'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        theme = Theme.objects.get(name='Forest')
        self.assertEqual(theme.created_by, self.user)
        self.assertEqual(theme.colors['primary'], '#228b22')
        self.assertEqual(theme.colors['secondary'], '#8b5cf6')

    def test_invalid_hex_color_is_rejected(self):
        response = self.client.post('/api/themes/', {
            'name': 'Broken',
            'colors': {'primary': 'blue'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('colors', response.data['errors'])

    def test_duplicate_name_is_rejected(self):
        response = self.client.post('/api/themes/', {'name': 'Modern Blue'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_only_creator_can_update(self):
        other = User.objects.create_user(username='other', email='other@example.com', password='x')
        theme = Theme.objects.create(name='Theirs', created_by=other)

        response = self.client.patch(f'/api/themes/{theme.id}/', {'description': 'mine now'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_merges_colors(self):
        theme = Theme.objects.create(name='Mine', created_by=self.user)

        response = self.client.patch(f'/api/themes/{theme.id}/', {
            'colors': {'text': '#000'},
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        theme.refresh_from_db()
        self.assertEqual(theme.colors['text'], '#000')
        self.assertEqual(theme.colors['primary'], '#3b82f6')

    def test_presets_need_admin_role(self):
        preset = Theme.objects.get(name='Modern Blue')

        response = self.client.delete(f'/api/themes/{preset.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.user.role = 'admin'
        self.user.save()
        response = self.client.delete(f'/api/themes/{preset.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

    def test_my_themes(self):
        Theme.objects.create(name='Private One', is_public=False, created_by=self.user)

        response = self.client.get('/api/themes/my-themes/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['name'] for t in response.data['results']], ['Private One'])
