"""
Seed the starter site templates.
"""
from django.db import migrations


def layout(**overrides):
    return {
        'direction': 'column', 'justifyContent': 'flex-start', 'alignItems': 'center',
        'gap': 16, 'padding': 24, 'backgroundColor': 'transparent', **overrides,
    }


def section(section_id, components, name='', navbar=False, **layout_overrides):
    return {
        'id': section_id,
        'sectionName': name,
        'showInNavbar': navbar,
        'components': components,
        'layout': layout(**layout_overrides),
    }


def prize_card(number, title, amount, icon):
    return {
        'id': f'card-{number}',
        'type': 'card',
        'props': {
            'title': title, 'description': amount, 'backgroundColor': '#ffffff',
            'borderColor': '#e5e7eb', 'padding': 24, 'cardType': 'icon', 'icon': icon,
        },
    }


HACKATHON_SECTIONS = [
    section('section-banner', [{
        'id': 'banner-1',
        'type': 'banner',
        'props': {
            'heading': 'HACKATHON 2025', 'subheading': 'Build. Ship. Win.',
            'backgroundColor': '#415f90', 'textColor': '#ffffff', 'height': '600px',
            'backgroundImage': '', 'buttonText': 'Register', 'buttonLink': '#', 'alt': '',
        },
    }], name='Home', navbar=True),
    section('section-about', [{
        'id': 'text-1',
        'type': 'text',
        'props': {
            'text': 'Join developers, designers, and innovators for a weekend of coding, '
                    'collaboration, and creativity. Build amazing projects, learn new skills, '
                    'and compete for exciting prizes!',
            'align': 'left', 'fontSize': 20, 'fontFamily': 'Source Sans Pro', 'color': '#3b0764',
        },
    }], name='About', navbar=True),
    section('section-prizes', [
        prize_card(1, '1st Prize', '₹1,00,000', '🥇'),
        prize_card(2, '2nd Prize', '₹75,000', '🥈'),
        prize_card(3, '3rd Prize', '₹50,000', '🥉'),
    ], name='Prizes', navbar=True, direction='row', justifyContent='space-between',
        alignItems='stretch', gap=24, padding=37),
    section('section-problem-button', [{
        'id': 'button-problems',
        'type': 'button',
        'props': {'text': 'Problem Statements', 'href': '#', 'variant': 'secondary', 'align': 'center'},
    }], name='Problems', navbar=True, justifyContent='center'),
    section('section-timer', [{
        'id': 'timer-1',
        'type': 'timer',
        'props': {
            'targetDate': '2025-12-31', 'title': 'EVENT STARTS IN!!!', 'backgroundColor': '#8f38b7',
            'textColor': '#ffffff', 'fontSize': 48, 'showLabels': True,
        },
    }], justifyContent='center'),
    section('section-rules', [{
        'id': 'collapsible-list-1',
        'type': 'collapsible-list',
        'props': {
            'items': [
                'Do not plagiarize any code',
                'Do not leave your assigned places without supervisor permission',
                'Do not litter the campus',
            ],
            'expanded': False, 'buttonTextShow': 'Show Rules', 'buttonTextHide': 'Hide Rules',
            'align': 'center', 'width': '400px',
        },
    }], justifyContent='center'),
    section('section-footer', [{
        'id': 'footer-1',
        'type': 'footer',
        'props': {
            'companyName': 'Your Hackathon',
            'description': 'Building amazing experiences for our participants.',
            'backgroundColor': '#d970ff', 'textColor': '#000000',
            'link1Text': 'About', 'link1Url': '#section-about',
            'link2Text': 'Prizes', 'link2Url': '#section-prizes',
        },
    }], justifyContent='center', padding=0, backgroundColor='#1f2937'),
]

LANDING_SECTIONS = [
    section('section-hero', [
        {
            'id': 'heading-hero',
            'type': 'heading',
            'props': {'text': 'Launch your next idea', 'level': 1, 'align': 'center', 'fontSize': 48},
        },
        {
            'id': 'text-hero',
            'type': 'text',
            'props': {'text': 'Everything you need to get your product in front of customers.', 'align': 'center'},
        },
        {
            'id': 'button-hero',
            'type': 'button',
            'props': {'text': 'Get started', 'linkType': 'section', 'sectionId': 'section-features', 'variant': 'primary'},
        },
    ], name='Home', navbar=True, justifyContent='center', padding=64),
    section('section-features', [
        {
            'id': f'card-feature-{number}',
            'type': 'card',
            'props': {'title': title, 'description': description, 'padding': 24},
        }
        for number, (title, description) in enumerate([
            ('Fast', 'Pages load in a blink.'),
            ('Flexible', 'Arrange sections any way you like.'),
            ('Friendly', 'No code required.'),
        ], start=1)
    ], name='Features', navbar=True, direction='row', justifyContent='space-between', alignItems='stretch'),
    section('section-footer', [{
        'id': 'footer-landing',
        'type': 'footer',
        'props': {'companyName': 'Your Company', 'description': 'Made with care.'},
    }], padding=0),
]

TEMPLATES = [
    {
        'name': 'Hackathon Event',
        'slug': 'hackathon-event',
        'description': 'Hackathon landing page with prizes, countdown timer, rules and footer',
        'category': 'event',
        'sections': HACKATHON_SECTIONS,
    },
    {
        'name': 'Landing Page',
        'slug': 'landing-page',
        'description': 'Product landing page with a hero, feature cards and a footer',
        'category': 'landing',
        'sections': LANDING_SECTIONS,
    },
]


def seed_templates(apps, schema_editor):
    SiteTemplate = apps.get_model('site_templates', 'SiteTemplate')

    for template in TEMPLATES:
        SiteTemplate.objects.get_or_create(
            slug=template['slug'],
            defaults={
                'name': template['name'],
                'description': template['description'],
                'category': template['category'],
                'sections': template['sections'],
            }
        )


def reverse_seed(apps, schema_editor):
    SiteTemplate = apps.get_model('site_templates', 'SiteTemplate')
    SiteTemplate.objects.filter(slug__in=[template['slug'] for template in TEMPLATES]).delete()


class Migration(migrations.Migration):
    dependencies = [
        ('site_templates', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_templates, reverse_seed),
    ]
