"""
Tests for the public site renderer.

Run: python manage.py test apps.renderer
"""
from datetime import datetime, timezone as dt_timezone

from django.test import TestCase, SimpleTestCase, override_settings

from apps.sites import services
from apps.sites.models import Page
from apps.themes.models import Theme
from apps.users.models import User
from .components import (
    RenderContext, sanitize_url, video_embed_url, render_component, resolve_theme,
    google_fonts_url,
)
from .middleware import subdomain_for_host


def component(component_type, **props):
    return {'id': f'{component_type}-1', 'type': component_type, 'props': props}


class SanitizeUrlTest(SimpleTestCase):

    def test_blocks_scriptable_schemes(self):
        for url in ('javascript:alert(1)', ' JavaScript:alert(1)', 'java\tscript:alert(1)',
                    'data:text/html;base64,PHNjcmlwdD4=', 'vbscript:msgbox', 'file:///etc/passwd'):
            self.assertEqual(sanitize_url(url), '#', url)

    def test_keeps_ordinary_urls(self):
        self.assertEqual(sanitize_url(' https://example.com/a?b=1 '), 'https://example.com/a?b=1')
        self.assertEqual(sanitize_url('/uploads/a.png'), '/uploads/a.png')
        self.assertEqual(sanitize_url('#section-about'), '#section-about')
        self.assertEqual(sanitize_url(''), '')
        self.assertEqual(sanitize_url(None), '')

    def test_video_embed_urls(self):
        self.assertEqual(video_embed_url('https://www.youtube.com/watch?v=abc123&t=5'),
                         'https://www.youtube.com/embed/abc123')
        self.assertEqual(video_embed_url('https://youtu.be/abc123'), 'https://www.youtube.com/embed/abc123')
        self.assertEqual(video_embed_url('https://www.youtube.com/shorts/abc123'),
                         'https://www.youtube.com/embed/abc123')
        self.assertEqual(video_embed_url('https://vimeo.com/76979871'), 'https://player.vimeo.com/video/76979871')
        self.assertEqual(video_embed_url('https://cdn.example.com/clip.mp4'), 'https://cdn.example.com/clip.mp4')
        self.assertEqual(video_embed_url('javascript:alert(1)'), '#')


class ComponentRenderTest(SimpleTestCase):

    def setUp(self):
        self.ctx = RenderContext(base_path='/site/demo',
                                 now=datetime(2025, 1, 1, tzinfo=dt_timezone.utc))

    def test_text_is_escaped(self):
        html = render_component(component('heading', text='<script>alert(1)</script>', level=1), self.ctx)

        self.assertIn('<h1', html)
        self.assertIn('&lt;script&gt;', html)
        self.assertNotIn('<script>', html)

    def test_unknown_type_renders_nothing(self):
        self.assertEqual(render_component(component('hologram', text='x'), self.ctx), '')
        self.assertEqual(render_component(component('form'), self.ctx), '')

    def test_heading_level_is_clamped(self):
        html = render_component(component('heading', text='Hi', level=9), self.ctx)
        self.assertTrue(html.startswith('<h6'))

    def test_css_injection_falls_back_to_theme(self):
        html = render_component(component('text', text='Hi', color='red; background: url(x)'), self.ctx)
        self.assertNotIn('url(x)', html)
        self.assertIn('color: #000000', html)

    def test_button_link_types(self):
        page = render_component(component('button', text='About', linkType='page', pageSlug='about'), self.ctx)
        section = render_component(component('button', text='Rules', linkType='section', sectionId='rules'), self.ctx)
        url = render_component(component('button', text='Go', href='javascript:alert(1)'), self.ctx)

        self.assertIn('href="/site/demo/about/"', page)
        self.assertIn('href="#rules"', section)
        self.assertIn('href="#"', url)

    def test_image_requires_safe_source(self):
        self.assertEqual(render_component(component('image', src='javascript:alert(1)'), self.ctx), '')
        html = render_component(component('image', src='/uploads/a.png', alt='A "quoted" alt'), self.ctx)
        self.assertIn('src="/uploads/a.png"', html)
        self.assertIn('alt="A &quot;quoted&quot; alt"', html)

    def test_video_uses_embed_url(self):
        html = render_component(component('video', url='https://youtu.be/xyz'), self.ctx)
        self.assertIn('src="https://www.youtube.com/embed/xyz"', html)

    def test_timer_renders_remaining_time(self):
        html = render_component(component('timer', targetDate='2025-01-03T12:30:00Z', title='Soon'), self.ctx)

        self.assertIn('data-target="2025-01-03T12:30:00+00:00"', html)
        self.assertIn('data-unit="days" style="font-size: 48px; font-weight: bold; display: block">02<', html)
        self.assertIn('data-unit="hours" style="font-size: 48px; font-weight: bold; display: block">12<', html)
        self.assertIn('Soon', html)

    def test_timer_in_the_past_shows_zero(self):
        html = render_component(component('timer', targetDate='2024-01-01'), self.ctx)
        self.assertIn('>00<', html)
        self.assertNotIn('>-', html)

    def test_timer_with_impossible_date_renders_nothing(self):
        self.assertEqual(render_component(component('timer', targetDate='2025-02-30'), self.ctx), '')
        self.assertEqual(render_component(component('timer', targetDate='2025-13-01T10:00:00'), self.ctx), '')
        self.assertEqual(render_component(component('timer', targetDate='soon'), self.ctx), '')

    def test_lists(self):
        numbered = render_component(component('bullet-list', items=['One', {'text': 'Two'}], style='numbered'),
                                    self.ctx)
        collapsible = render_component(component('collapsible-list', items=['Rule'],
                                                 buttonTextShow='Show Rules', buttonTextHide='Hide Rules'),
                                       self.ctx)

        self.assertTrue(numbered.startswith('<ol'))
        self.assertIn('<li>Two</li>', numbered)
        self.assertIn('<details', collapsible)
        self.assertIn('>Show Rules</summary>', collapsible)

    def test_footer_and_social(self):
        footer = render_component(component('footer', companyName='Acme', link1Text='About',
                                             link1Url='#section-about'), self.ctx)
        social = render_component(component('social', twitterUrl='https://twitter.com/acme'), self.ctx)

        self.assertIn('&copy; 2025 Acme', footer)
        self.assertIn('href="#section-about"', footer)
        self.assertIn('href="https://twitter.com/acme"', social)
        self.assertEqual(render_component(component('social'), self.ctx), '')


class ThemeResolutionTest(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='owner', email='owner@example.com', password='x')

    def test_custom_theme_without_theme(self):
        site = services.create_site(self.user, {'site_name': 'Demo', 'subdomain': 'demo'})
        site.custom_theme = {'colors': {'primary': '#ff0000'}}

        colors, fonts = resolve_theme(site)

        self.assertEqual(colors['primary'], '#ff0000')
        self.assertEqual(colors['background'], '#ffffff')
        self.assertEqual(fonts, {'heading': 'Inter', 'body': 'Inter'})

    def test_selected_theme_wins(self):
        theme = Theme.objects.create(name='Ocean', colors={'primary': '#0077be', 'text': '#102030'},
                                     fonts={'heading': 'Playfair Display', 'body': 'Inter'})
        site = services.create_site(self.user, {'site_name': 'Demo', 'subdomain': 'demo', 'theme': theme})

        colors, fonts = resolve_theme(site)

        self.assertEqual(colors['primary'], '#0077be')
        self.assertEqual(colors['secondary'], '#8b5cf6')
        self.assertEqual(fonts['heading'], 'Playfair Display')

    def test_google_fonts_url(self):
        self.assertEqual(
            google_fonts_url({'heading': 'Playfair Display', 'body': 'Inter'}),
            'https://fonts.googleapis.com/css2?family=Playfair+Display&family=Inter&display=swap',
        )
        self.assertEqual(
            google_fonts_url({'heading': 'Inter', 'body': 'Inter'}),
            'https://fonts.googleapis.com/css2?family=Inter&display=swap',
        )


class SitePageViewTest(TestCase):

    def setUp(self):
        self.user = User.objects.create_user(username='owner', email='owner@example.com', password='x')
        self.site = services.create_site(self.user, {'site_name': 'Demo Site', 'subdomain': 'demo'}, home_sections=[
            {
                'id': 'section-hero', 'order': 0, 'sectionName': 'Welcome', 'showInNavbar': True,
                'layout': {'direction': 'row', 'gap': 8},
                'components': [{'id': 'h1', 'type': 'heading', 'props': {'text': 'Hello world', 'level': 1}}],
            },
        ])
        self.about = Page.objects.create(site=self.site, page_name='About', slug='about', order=1, sections=[
            {'id': 'section-about', 'components': [{'id': 't1', 'type': 'text', 'props': {'text': 'About us'}}]},
        ])
        services.publish_site(self.site)

    def test_unpublished_site_is_not_found(self):
        services.unpublish_site(self.site)
        self.assertEqual(self.client.get('/site/demo/').status_code, 404)

    def test_home_page(self):
        response = self.client.get('/site/demo/')

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Hello world')
        self.assertContains(response, '<section id="section-hero"')
        self.assertContains(response, 'flex-direction: row')
        self.assertContains(response, 'href="#section-hero">Welcome</a>')
        self.assertContains(response, 'href="/site/demo/about/">About</a>')
        self.assertContains(response, 'https://fonts.googleapis.com/css2?family=Inter&amp;display=swap')

    def test_named_page(self):
        response = self.client.get('/site/demo/about/')

        self.assertContains(response, 'About us')
        self.assertNotContains(response, 'Hello world')

    def test_first_page_when_no_home(self):
        Page.objects.filter(site=self.site).update(is_home=False)
        Page.objects.filter(pk=self.about.pk).update(order=-1)

        self.assertContains(self.client.get('/site/demo/'), 'About us')

    def test_hidden_and_missing_pages(self):
        self.about.is_visible = False
        self.about.save()

        self.assertEqual(self.client.get('/site/demo/about/').status_code, 404)
        self.assertEqual(self.client.get('/site/demo/nowhere/').status_code, 404)
        self.assertNotContains(self.client.get('/site/demo/'), '/site/demo/about/')

    def test_page_hidden_from_navbar(self):
        self.about.settings = {**self.about.settings, 'showInNavbar': False}
        self.about.save()

        response = self.client.get('/site/demo/')
        self.assertNotContains(response, 'href="/site/demo/about/"')
        self.assertEqual(self.client.get('/site/demo/about/').status_code, 200)

    def test_legacy_content_and_empty_page(self):
        self.about.sections = []
        self.about.content = [{'id': 'old', 'type': 'text', 'props': {'text': 'Legacy body'}}]
        self.about.save()
        self.assertContains(self.client.get('/site/demo/about/'), 'Legacy body')

        self.about.content = []
        self.about.save()
        self.assertContains(self.client.get('/site/demo/about/'), 'This page has no content yet.')

    def test_custom_css_included_and_custom_js_ignored(self):
        self.site.custom_theme = {**self.site.custom_theme, 'customCSS': '.hero > h1 { color: red; }</style>'}
        self.site.save()
        self.about.settings = {**self.about.settings, 'customCss': 'p { margin: 0; }',
                               'customJs': 'alert("owned")'}
        self.about.save()

        response = self.client.get('/site/demo/about/')

        self.assertContains(response, '.hero > h1 { color: red; }<\\/style>')
        self.assertContains(response, 'p { margin: 0; }')
        self.assertNotContains(response, 'alert("owned")')

    def test_page_with_impossible_timer_date_still_renders(self):
        self.about.sections[0]['components'].append(
            {'id': 'timer-1', 'type': 'timer', 'props': {'targetDate': '2025-02-30', 'title': 'Launch'}}
        )
        self.about.save()

        response = self.client.get('/site/demo/about/')

        self.assertContains(response, 'About us')
        self.assertNotContains(response, 'sb-timer"')

    def test_post_is_not_allowed(self):
        self.assertEqual(self.client.post('/site/demo/').status_code, 405)


@override_settings(SITE_SUBDOMAIN_BASE='sites.test', ALLOWED_HOSTS=['.sites.test', 'testserver'])
class SubdomainRoutingTest(TestCase):

    def setUp(self):
        user = User.objects.create_user(username='owner', email='owner@example.com', password='x')
        self.site = services.create_site(user, {'site_name': 'Demo Site', 'subdomain': 'demo'}, home_sections=[
            {'id': 'section-hero', 'components': [{'id': 'h1', 'type': 'heading', 'props': {'text': 'Hosted'}}]},
        ])
        services.publish_site(self.site)

    def test_subdomain_for_host(self):
        self.assertEqual(subdomain_for_host('demo.sites.test'), 'demo')
        self.assertEqual(subdomain_for_host('demo.sites.test:8000'), 'demo')
        self.assertIsNone(subdomain_for_host('sites.test'))
        self.assertIsNone(subdomain_for_host('www.sites.test'))
        self.assertIsNone(subdomain_for_host('a.b.sites.test'))
        self.assertIsNone(subdomain_for_host('testserver'))

    def test_site_host_renders_site(self):
        response = self.client.get('/', HTTP_HOST='demo.sites.test')

        self.assertContains(response, 'Hosted')
        self.assertContains(response, 'class="sb-brand" href="/"')

    def test_api_paths_pass_through(self):
        response = self.client.get('/api/health/', HTTP_HOST='demo.sites.test')
        self.assertNotContains(response, 'Hosted', status_code=response.status_code)

    def test_unknown_site_host(self):
        self.assertEqual(self.client.get('/', HTTP_HOST='missing.sites.test').status_code, 404)
