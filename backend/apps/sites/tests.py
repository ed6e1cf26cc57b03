"""
Tests for sites and pages.

Run: python manage.py test apps.sites
"""
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from apps.themes.models import Theme
from apps.users.models import User
from .models import Site, Page
from . import services


def make_user(name='owner', **extra):
    return User.objects.create_user(username=name, email=f'{name}@example.com', password='x', **extra)


def heading_section(section_id='section-hero', text='Hello'):
    return {
        'id': section_id,
        'components': [{'id': f'{section_id}-heading', 'type': 'heading', 'props': {'text': text}}],
    }


class SiteModelTest(TestCase):

    def setUp(self):
        self.user = make_user()

    def test_generate_unique_subdomain_appends_counter(self):
        Site.objects.create(user=self.user, site_name='Blog', subdomain='my-blog')
        Site.objects.create(user=self.user, site_name='Blog', subdomain='my-blog-1')

        self.assertEqual(Site.generate_unique_subdomain('My Blog'), 'my-blog-2')

    def test_generate_unique_subdomain_pads_short_names(self):
        self.assertEqual(Site.generate_unique_subdomain('A'), 'a-site')

    def test_generated_values_replace_underscores(self):
        site = Site.objects.create(user=self.user, site_name='Blog', subdomain='blog')

        self.assertEqual(Site.generate_unique_subdomain('My_Portfolio'), 'my-portfolio')
        self.assertEqual(Site.generate_unique_subdomain('__x__'), 'x-site')
        self.assertEqual(Page.generate_unique_slug(site, 'About_Us'), 'about-us')

    def test_only_one_home_page_per_site(self):
        site = Site.objects.create(user=self.user, site_name='Blog', subdomain='blog')
        first = Page.objects.create(site=site, page_name='Home', slug='', is_home=True)
        second = Page.objects.create(site=site, page_name='Landing', slug='landing', is_home=True)

        first.refresh_from_db()
        self.assertFalse(first.is_home)
        self.assertTrue(second.is_home)

    def test_home_slash_is_normalized(self):
        site = Site.objects.create(user=self.user, site_name='Blog', subdomain='blog')
        page = Page.objects.create(site=site, page_name='Home', slug='/', is_home=True)
        self.assertEqual(page.slug, '')

    def test_generate_unique_slug_keeps_nested_slugs(self):
        site = Site.objects.create(user=self.user, site_name='Blog', subdomain='blog')
        Page.objects.create(site=site, page_name='Team', slug='about/team')

        self.assertEqual(Page.generate_unique_slug(site, 'about/team'), 'about/team-1')
        self.assertEqual(Page.generate_unique_slug(site, 'Contact Us'), 'contact-us')


class SiteApiTest(TestCase):
    """Site CRUD and publishing."""

    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.client.force_authenticate(user=self.user)

    def create_site(self, subdomain='my-site', **data):
        return self.client.post('/api/sites/', {'site_name': 'My Site', 'subdomain': subdomain, **data}, format='json')

    def test_create_site_makes_home_page(self):
        response = self.create_site()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        site = Site.objects.get(subdomain='my-site')
        self.assertEqual(site.user, self.user)
        home = site.pages.get()
        self.assertTrue(home.is_home)
        self.assertEqual(home.slug, '')
        self.assertEqual(response.data['pages'][0]['page_name'], 'Home')

    def test_subdomain_is_lowercased(self):
        response = self.create_site(subdomain='Mixed-Case')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['subdomain'], 'mixed-case')

    def test_subdomain_uniqueness_enforced_at_creation(self):
        other = make_user('other')
        Site.objects.create(user=other, site_name='Taken', subdomain='my-site')

        response = self.create_site()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {
            'success': False,
            'message': 'Subdomain already taken',
            'errors': {'non_field_errors': ['Subdomain already taken']},
        })

    def test_invalid_subdomain_is_rejected(self):
        response = self.create_site(subdomain='no_underscores')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('subdomain', response.data['errors'])

        response = self.create_site(subdomain='ab')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_site_limit(self):
        self.user.max_sites = 1
        self.user.save()
        self.create_site('first-site')

        response = self.create_site('second-site')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('maximum number of sites', response.data['message'])

    def test_update_rechecks_subdomain(self):
        Site.objects.create(user=make_user('other'), site_name='Taken', subdomain='taken')
        site_id = self.create_site().data['id']

        response = self.client.put(f'/api/sites/{site_id}/', {'subdomain': 'taken'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Subdomain already taken')

        response = self.client.put(f'/api/sites/{site_id}/', {'site_name': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['subdomain'], 'my-site')

    def test_theme_and_custom_theme(self):
        theme = Theme.objects.get(name='Dark Elegance')

        response = self.create_site(theme=theme.id, custom_theme={'colors': {'primary': '#ff0000'}})

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['theme_detail']['name'], 'Dark Elegance')
        self.assertEqual(response.data['custom_theme']['colors']['primary'], '#ff0000')
        self.assertEqual(response.data['custom_theme']['colors']['secondary'], '#8b5cf6')

    def test_custom_theme_rejects_bad_colors(self):
        response = self.create_site(custom_theme={'colors': {'primary': 'red'}})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_sites_are_private_to_owner(self):
        site = Site.objects.create(user=make_user('other'), site_name='Theirs', subdomain='theirs')

        self.assertEqual(self.client.get(f'/api/sites/{site.id}/').status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get('/api/sites/').data['count'], 0)

    def test_list_filters(self):
        self.create_site('alpha-site', site_name='Alpha')
        self.create_site('beta-site', site_name='Beta')
        Site.objects.filter(subdomain='beta-site').update(is_published=True)

        response = self.client.get('/api/sites/', {'search': 'alp'})
        self.assertEqual([s['subdomain'] for s in response.data['results']], ['alpha-site'])

        response = self.client.get('/api/sites/', {'is_published': 'true'})
        self.assertEqual([s['subdomain'] for s in response.data['results']], ['beta-site'])

    def test_public_lookup_by_subdomain(self):
        site_id = self.create_site().data['id']
        anonymous = APIClient()

        response = anonymous.get('/api/sites/', {'subdomain': 'my-site'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 0)

        self.client.post(f'/api/sites/{site_id}/publish/')
        response = anonymous.get('/api/sites/', {'subdomain': 'MY-SITE'})
        self.assertEqual(response.data['count'], 1)
        self.assertEqual(response.data['results'][0]['site_name'], 'My Site')

    def test_list_requires_auth_without_subdomain(self):
        response = APIClient().get('/api/sites/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_cannot_publish_without_pages(self):
        site = Site.objects.create(user=self.user, site_name='Empty', subdomain='empty')

        response = self.client.post(f'/api/sites/{site.id}/publish/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'success': False, 'message': 'Cannot publish site without pages'})
        site.refresh_from_db()
        self.assertFalse(site.is_published)

    def test_publish_and_unpublish(self):
        site_id = self.create_site().data['id']

        response = self.client.post(f'/api/sites/{site_id}/publish/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_published'])
        self.assertIsNotNone(response.data['published_at'])

        response = self.client.post(f'/api/sites/{site_id}/unpublish/')
        self.assertFalse(response.data['is_published'])

    def test_delete_site_cascades_to_pages(self):
        site_id = self.create_site().data['id']
        site = Site.objects.get(pk=site_id)
        Page.objects.create(site=site, page_name='About', slug='about', order=1)

        response = self.client.delete(f'/api/sites/{site_id}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Site.objects.filter(pk=site_id).exists())
        self.assertFalse(Page.objects.filter(site_id=site_id).exists())

    def test_duplicate_site(self):
        site_id = self.create_site().data['id']
        Site.objects.filter(pk=site_id).update(is_published=True)
        Page.objects.create(site_id=site_id, page_name='About', slug='about', order=1)

        response = self.client.post(f'/api/sites/{site_id}/duplicate/')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['subdomain'], 'my-site-copy')
        self.assertEqual(response.data['site_name'], 'My Site (Copy)')
        self.assertFalse(response.data['is_published'])
        copy_site = Site.objects.get(pk=response.data['id'])
        self.assertEqual(copy_site.pages.count(), 2)
        self.assertEqual(copy_site.pages.filter(is_home=True).count(), 1)

        response = self.client.post(f'/api/sites/{site_id}/duplicate/')
        self.assertEqual(response.data['subdomain'], 'my-site-copy-1')


class PageApiTest(TestCase):
    """Page CRUD through the site and page endpoints."""

    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.client.force_authenticate(user=self.user)
        self.site = services.create_site(self.user, {'site_name': 'My Site', 'subdomain': 'my-site'})
        self.home = self.site.pages.get()

    def add_page(self, **data):
        return self.client.post(f'/api/sites/{self.site.id}/pages/', {'page_name': 'About Us', **data}, format='json')

    def test_create_page_generates_slug_and_order(self):
        response = self.add_page()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['slug'], 'about-us')
        self.assertEqual(response.data['order'], 1)
        self.assertFalse(response.data['is_home'])

        response = self.add_page()
        self.assertEqual(response.data['slug'], 'about-us-1')

    def test_create_page_slug_has_no_underscores(self):
        response = self.add_page(page_name='Team_Members')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['slug'], 'team-members')

    def test_create_home_page_demotes_previous_home(self):
        response = self.add_page(page_name='New Home', is_home=True)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.home.refresh_from_db()
        self.assertFalse(self.home.is_home)
        self.assertEqual(self.site.pages.filter(is_home=True).count(), 1)

    def test_sections_are_validated(self):
        response = self.add_page(sections=[{'components': [{'type': 'marquee'}]}])

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Unknown component type', response.data['message'])

    def test_sections_are_normalized(self):
        response = self.add_page(sections=[heading_section()])

        section = response.data['sections'][0]
        self.assertEqual(section['order'], 0)
        self.assertEqual(section['layout']['direction'], 'column')
        self.assertEqual(section['components'][0]['props'], {'text': 'Hello'})

    def test_list_pages_for_owner(self):
        Page.objects.create(site=self.site, page_name='Hidden', slug='hidden', order=2, is_visible=False)

        response = self.client.get(f'/api/sites/{self.site.id}/pages/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['page_name'] for p in response.data], ['Home', 'Hidden'])

    def test_list_pages_publicly_only_when_published(self):
        Page.objects.create(site=self.site, page_name='Hidden', slug='hidden', order=2, is_visible=False)
        anonymous = APIClient()

        self.assertEqual(
            anonymous.get(f'/api/sites/{self.site.id}/pages/').status_code,
            status.HTTP_404_NOT_FOUND
        )

        Site.objects.filter(pk=self.site.pk).update(is_published=True)
        response = anonymous.get(f'/api/sites/{self.site.id}/pages/')
        self.assertEqual([p['page_name'] for p in response.data], ['Home'])

    def test_rename_home_page_preserves_is_home(self):
        response = self.client.put(f'/api/pages/{self.home.id}/', {'page_name': 'Welcome'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.home.refresh_from_db()
        self.assertEqual(self.home.page_name, 'Welcome')
        self.assertTrue(self.home.is_home)

    def test_update_rejects_taken_slug(self):
        about = Page.objects.create(site=self.site, page_name='About', slug='about', order=1)
        contact = Page.objects.create(site=self.site, page_name='Contact', slug='contact', order=2)

        response = self.client.patch(f'/api/pages/{contact.id}/', {'slug': 'about'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Slug already exists for this site')
        self.assertEqual(about.slug, 'about')

    def test_update_touches_site(self):
        before = self.site.last_edited_at
        self.client.patch(f'/api/pages/{self.home.id}/', {'sections': [heading_section()]}, format='json')

        self.site.refresh_from_db()
        self.assertGreater(self.site.last_edited_at, before)

    def test_delete_only_page_is_rejected(self):
        response = self.client.delete(f'/api/pages/{self.home.id}/')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot delete the only page of a site')
        self.assertTrue(Page.objects.filter(pk=self.home.pk).exists())

    def test_delete_home_promotes_next_page(self):
        Page.objects.create(site=self.site, page_name='Later', slug='later', order=5)
        about = Page.objects.create(site=self.site, page_name='About', slug='about', order=1)

        response = self.client.delete(f'/api/pages/{self.home.id}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        about.refresh_from_db()
        self.assertTrue(about.is_home)
        self.assertEqual(self.site.pages.filter(is_home=True).count(), 1)

    def test_reorder_pages(self):
        about = Page.objects.create(site=self.site, page_name='About', slug='about', order=1)

        response = self.client.put(f'/api/sites/{self.site.id}/pages/reorder/', {
            'pageOrders': [{'pageId': about.id, 'order': 0}, {'pageId': self.home.id, 'order': 1}],
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['page_name'] for p in response.data], ['About', 'Home'])

    def test_reorder_rejects_foreign_pages(self):
        other_site = services.create_site(make_user('other'), {'site_name': 'Other', 'subdomain': 'other'})

        response = self.client.put(f'/api/sites/{self.site.id}/pages/reorder/', {
            'page_orders': [{'page_id': other_site.pages.get().id, 'order': 0}],
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_page(self):
        response = self.client.post(f'/api/pages/{self.home.id}/duplicate/')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['page_name'], 'Home (Copy)')
        self.assertEqual(response.data['slug'], 'home-copy')
        self.assertFalse(response.data['is_home'])
        self.assertEqual(response.data['order'], 1)

    def test_patch_content(self):
        response = self.client.patch(f'/api/pages/{self.home.id}/content/', {
            'sections': [heading_section(text='Updated')],
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.home.refresh_from_db()
        self.assertEqual(self.home.sections[0]['components'][0]['props']['text'], 'Updated')

    def test_pages_of_other_users_are_not_editable(self):
        stranger = APIClient()
        stranger.force_authenticate(user=make_user('stranger'))

        response = stranger.patch(f'/api/pages/{self.home.id}/', {'page_name': 'Mine'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

        response = stranger.post(f'/api/sites/{self.site.id}/pages/', {'page_name': 'Mine'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_public_page_read(self):
        anonymous = APIClient()
        self.assertEqual(anonymous.get(f'/api/pages/{self.home.id}/').status_code, status.HTTP_404_NOT_FOUND)

        Site.objects.filter(pk=self.site.pk).update(is_published=True)
        self.assertEqual(anonymous.get(f'/api/pages/{self.home.id}/').status_code, status.HTTP_200_OK)
