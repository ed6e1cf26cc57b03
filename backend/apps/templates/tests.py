"""
Tests for site templates.

Run: python manage.py test apps.templates
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.sites.models import Site
from apps.users.models import User
from .models import SiteTemplate


class SiteTemplateTest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username='maker', email='maker@example.com', password='x')

    def test_seeded_templates_are_listed_publicly(self):
        response = self.client.get('/api/templates/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        slugs = {template['slug'] for template in response.data['results']}
        self.assertEqual(slugs, {'hackathon-event', 'landing-page'})

    def test_inactive_templates_are_hidden(self):
        SiteTemplate.objects.filter(slug='landing-page').update(is_active=False)

        self.assertEqual(self.client.get('/api/templates/landing-page/').status_code, status.HTTP_404_NOT_FOUND)

    def test_retrieve_by_slug(self):
        response = self.client.get('/api/templates/hackathon-event/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['sections'][0]['id'], 'section-banner')

    def test_use_template_requires_auth(self):
        response = self.client.post('/api/templates/landing-page/use_template/', {'site_name': 'Launch'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_use_template_creates_site(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.post('/api/templates/landing-page/use_template/', {'site_name': 'Rocket Launch'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['subdomain'], 'rocket-launch')
        site = Site.objects.get(pk=response.data['id'])
        home = site.pages.get()
        self.assertTrue(home.is_home)
        self.assertEqual([s['id'] for s in home.sections], ['section-hero', 'section-features', 'section-footer'])
        self.assertEqual(SiteTemplate.objects.get(slug='landing-page').usage_count, 1)

    def test_use_template_generates_unique_subdomain(self):
        self.client.force_authenticate(user=self.user)
        url = '/api/templates/landing-page/use_template/'

        self.client.post(url, {'site_name': 'Rocket'}, format='json')
        response = self.client.post(url, {'site_name': 'Rocket'}, format='json')

        self.assertEqual(response.data['subdomain'], 'rocket-1')

    def test_generated_subdomain_has_no_underscores(self):
        self.client.force_authenticate(user=self.user)

        response = self.client.post('/api/templates/landing-page/use_template/',
                                    {'site_name': 'My_Portfolio'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['subdomain'], 'my-portfolio')

    def test_use_template_respects_subdomain_and_limits(self):
        self.client.force_authenticate(user=self.user)
        url = '/api/templates/hackathon-event/use_template/'
        Site.objects.create(user=self.user, site_name='Taken', subdomain='hack')

        response = self.client.post(url, {'site_name': 'Hack', 'subdomain': 'hack'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Subdomain already taken')

        self.user.max_sites = 1
        self.user.save()
        response = self.client.post(url, {'site_name': 'Hack'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(SiteTemplate.objects.get(slug='hackathon-event').usage_count, 0)
