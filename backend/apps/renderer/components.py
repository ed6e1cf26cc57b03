"""
HTML for published pages.

Every renderable component type has a function in RENDERERS taking the
component's props and a RenderContext and returning safe HTML. Text is
escaped through format_html; links and image sources go through
sanitize_url first.
"""
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, time as dt_time
from urllib.parse import urlparse, parse_qs, quote

from django.template.defaultfilters import linebreaksbr
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from django.utils.html import format_html, format_html_join, mark_safe

logger = logging.getLogger(__name__)

DEFAULT_COLORS = {
    'background': '#ffffff',
    'text': '#000000',
    'primary': '#3b82f6',
    'secondary': '#8b5cf6',
}
DEFAULT_FONTS = {'heading': 'Inter', 'body': 'Inter'}

BLOCKED_URL_SCHEMES = ('javascript:', 'data:', 'vbscript:', 'file:')

# Characters that would let a value escape its CSS declaration
_CSS_UNSAFE = re.compile(r'[;{}<>\\]|url\s*\(|expression\s*\(', re.IGNORECASE)
_URL_NOISE = re.compile(r'[\x00-\x20]')


def sanitize_url(url):
    """Return `url` trimmed, or '#' when it uses a scriptable scheme."""
    if not url or not isinstance(url, str):
        return ''
    url = url.strip()
    if _URL_NOISE.sub('', url).lower().startswith(BLOCKED_URL_SCHEMES):
        logger.warning(f"Blocked unsafe URL: {url[:50]}")
        return '#'
    return url


def css_value(value, default=''):
    if value is None or value == '':
        return default
    value = str(value).strip()
    if _CSS_UNSAFE.search(value):
        return default
    return value


def px(value, default=''):
    """Numbers become pixel lengths, strings pass through as CSS lengths."""
    if isinstance(value, bool) or value in (None, ''):
        return default
    if isinstance(value, (int, float)):
        return f"{value:g}px"
    value = str(value).strip()
    if re.fullmatch(r'\d+(\.\d+)?', value):
        return f"{value}px"
    return css_value(value, default)


def style(**declarations):
    """Build an inline style, skipping empty values. font_size -> font-size."""
    parts = []
    for name, value in declarations.items():
        value = css_value(value)
        if value:
            parts.append(f"{name.replace('_', '-')}: {value}")
    return '; '.join(parts)


def font_stack(family):
    family = css_value(family, 'Inter').replace("'", '').replace('"', '')
    return f"'{family}', sans-serif"


def as_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def as_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def resolve_theme(site):
    """
    Colours and fonts for a site: the chosen theme when there is one,
    otherwise the site's custom theme, with defaults for missing keys.
    """
    custom = site.custom_theme if isinstance(site.custom_theme, dict) else {}
    theme = site.theme

    colors = dict(DEFAULT_COLORS)
    fonts = dict(DEFAULT_FONTS)
    if theme is not None:
        colors.update(theme.colors or {})
        fonts.update(theme.fonts or {})
    else:
        colors.update(custom.get('colors') or {})
        fonts.update(custom.get('fonts') or {})
    return colors, fonts


def google_fonts_url(fonts):
    families = []
    for family in (fonts.get('heading'), fonts.get('body')):
        family = css_value(family)
        if family and family not in families:
            families.append(family)
    if not families:
        return ''
    query = '&'.join(f"family={quote(f, safe='').replace('%20', '+')}" for f in families)
    return f"https://fonts.googleapis.com/css2?{query}&display=swap"


def video_embed_url(url):
    """Turn YouTube and Vimeo watch links into player URLs."""
    url = sanitize_url(url)
    if not url or url == '#':
        return url

    parsed = urlparse(url if '//' in url else f"https://{url}")
    host = parsed.netloc.lower()
    if host.startswith('www.') or host.startswith('m.'):
        host = host.split('.', 1)[1]
    path = parsed.path.strip('/')

    if host == 'youtu.be' and path:
        return f"https://www.youtube.com/embed/{path.split('/')[0]}"
    if host in ('youtube.com', 'youtube-nocookie.com'):
        video_id = parse_qs(parsed.query).get('v', [''])[0]
        if not video_id:
            segments = path.split('/')
            if len(segments) >= 2 and segments[0] in ('embed', 'shorts', 'live', 'v'):
                video_id = segments[1]
        if video_id:
            return f"https://www.youtube.com/embed/{video_id}"
    if host == 'vimeo.com':
        match = re.search(r'(\d+)', path)
        if match:
            return f"https://player.vimeo.com/video/{match.group(1)}"
    return url


def parse_target_date(value):
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    try:
        target = parse_datetime(value)
        day = parse_date(value) if target is None else None
    except ValueError:
        # Well formed but impossible, e.g. 2025-02-30
        return None
    if target is None:
        if day is None:
            return None
        target = datetime.combine(day, dt_time.min)
    if timezone.is_naive(target):
        target = timezone.make_aware(target, timezone.get_current_timezone())
    return target


def time_remaining(target, now=None):
    """Days, hours, minutes and seconds until `target`, never negative."""
    now = now or timezone.now()
    seconds = max(int((target - now).total_seconds()), 0)
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    return {'days': days, 'hours': hours, 'minutes': minutes, 'seconds': seconds}


@dataclass
class RenderContext:
    colors: dict = field(default_factory=lambda: dict(DEFAULT_COLORS))
    fonts: dict = field(default_factory=lambda: dict(DEFAULT_FONTS))
    base_path: str = ''
    now: datetime = None

    def color(self, name):
        return css_value(self.colors.get(name), DEFAULT_COLORS.get(name, ''))

    def page_url(self, slug):
        slug = (slug or '').strip('/')
        return f"{self.base_path}/{slug}/" if slug else f"{self.base_path}/"


def text_block(value):
    """Escape text and keep its line breaks."""
    return linebreaksbr(value if isinstance(value, str) else '', autoescape=True)


def item_text(item):
    if isinstance(item, dict):
        return str(item.get('text') or item.get('title') or item.get('content') or '')
    return '' if item is None else str(item)


def auto_margin(props):
    if not props.get('width'):
        return ''
    return {'center': '0 auto', 'right': '0 0 0 auto'}.get(props.get('align'), '0')


def text_decoration_styles(props):
    return {
        'font_weight': 'bold' if props.get('bold') else '',
        'font_style': 'italic' if props.get('italic') else '',
        'text_decoration': 'underline' if props.get('underline') else '',
    }


def render_heading(props, ctx):
    level = min(max(as_int(props.get('level'), 2), 1), 6)
    css = style(
        text_align=props.get('align'),
        color=css_value(props.get('color'), ctx.color('primary')),
        font_family=font_stack(props.get('fontFamily') or ctx.fonts.get('heading')),
        font_size=px(props.get('fontSize')),
        max_width=px(props.get('width')),
        margin=auto_margin(props),
        **text_decoration_styles(props),
    )
    return format_html('<h{} class="sb-heading" style="{}">{}</h{}>', level, css, props.get('text', ''), level)


def render_text(props, ctx):
    css = style(
        text_align=props.get('align'),
        color=css_value(props.get('color'), ctx.color('text')),
        font_family=font_stack(props.get('fontFamily') or ctx.fonts.get('body')),
        font_size=px(props.get('fontSize')),
        max_width=px(props.get('width')),
        margin=auto_margin(props),
        **text_decoration_styles(props),
    )
    return format_html('<p class="sb-text" style="{}">{}</p>', css, text_block(props.get('text')))


def render_image(props, ctx):
    src = sanitize_url(props.get('src'))
    if not src or src == '#':
        return ''

    floated = props.get('float') if props.get('float') in ('left', 'right') else ''
    img = format_html(
        '<img src="{}" alt="{}" loading="lazy" style="{}">',
        src,
        props.get('alt', ''),
        style(
            width=px(props.get('width'), '100%'),
            max_width='100%',
            height=px(props.get('height'), 'auto'),
            object_fit=css_value(props.get('objectFit'), 'cover' if props.get('height') else 'contain'),
            float=floated,
            margin_right='20px' if floated == 'left' else '',
            margin_left='20px' if floated == 'right' else '',
            margin_bottom='16px' if floated else '',
            border_radius=px(props.get('borderRadius')),
        ),
    )
    link = sanitize_url(props.get('link'))
    if link:
        img = format_html('<a href="{}">{}</a>', link, img)
    align = 'left' if floated else css_value(props.get('align'), 'center')
    return format_html('<div class="sb-image" style="{}">{}</div>', style(text_align=align, width='100%'), img)


BUTTON_PADDING = {'small': '6px 16px', 'medium': '10px 24px', 'large': '14px 32px'}


def button_href(props, ctx):
    link_type = props.get('linkType') or 'url'
    if link_type == 'page':
        return ctx.page_url(props.get('pageSlug'))
    if link_type == 'section':
        section_id = str(props.get('sectionId') or '').lstrip('#')
        return f"#{section_id}" if section_id else '#'
    return sanitize_url(props.get('href')) or '#'


def render_button(props, ctx):
    default_color = ctx.color('secondary') if props.get('variant') == 'secondary' else ctx.color('primary')
    css = style(
        display='inline-block',
        padding=BUTTON_PADDING.get(props.get('size'), BUTTON_PADDING['medium']),
        background_color=css_value(props.get('buttonColor'), default_color),
        color=css_value(props.get('textColor'), '#ffffff'),
        border_radius=px(props.get('borderRadius'), '8px'),
        font_family=font_stack(ctx.fonts.get('body')),
        text_decoration='none',
        font_weight='500',
    )
    return format_html(
        '<div class="sb-button" style="{}"><a href="{}" style="{}">{}</a></div>',
        style(text_align=css_value(props.get('align'), 'center')),
        button_href(props, ctx),
        css,
        props.get('text', ''),
    )


def render_video(props, ctx):
    src = video_embed_url(props.get('url'))
    if not src or src == '#':
        return ''
    return format_html(
        '<div class="sb-video" style="{}"><iframe src="{}" title="Embedded video" '
        'style="position: absolute; inset: 0; width: 100%; height: 100%; border: 0" '
        'allowfullscreen></iframe></div>',
        style(position='relative', width=px(props.get('width'), '100%'), aspect_ratio='16 / 9'),
        src,
    )


def render_divider(props, ctx):
    line_style = props.get('style') or 'solid'
    if line_style == 'none':
        return mark_safe('<div class="sb-divider" style="clear: both"></div>')
    return format_html(
        '<div class="sb-divider" style="clear: both"><hr style="{}"></div>',
        style(
            border='0',
            border_top=f"{px(props.get('thickness'), '1px')} {css_value(line_style, 'solid')} "
                       f"{css_value(props.get('color'), ctx.color('primary'))}",
            width=px(props.get('width'), '100%'),
        ),
    )


def render_card(props, ctx):
    card_type = props.get('cardType')
    media = ''
    if card_type == 'image':
        image = sanitize_url(props.get('image'))
        if image and image != '#':
            media = format_html(
                '<img src="{}" alt="{}" style="{}">',
                image, props.get('title', ''),
                style(width='100%', height=px(props.get('imageFrameHeight'), '180px'),
                      object_fit='cover', border_radius='6px', margin_bottom='12px'),
            )
    elif props.get('icon'):
        media = format_html('<div class="sb-card-icon" style="font-size: 36px; margin-bottom: 12px">{}</div>',
                            props['icon'])

    return format_html(
        '<div class="sb-card" style="{}">{}<h3 style="{}">{}</h3><p style="{}">{}</p></div>',
        style(
            display='flex', flex_direction='column', align_items='center',
            background_color=css_value(props.get('backgroundColor'), '#ffffff'),
            border=f"2px solid {css_value(props.get('borderColor'), '#e5e7eb')}",
            border_radius='8px',
            padding=px(props.get('padding'), '24px'),
            min_width='200px', flex='1 1 0',
        ),
        media,
        style(font_family=font_stack(ctx.fonts.get('heading')), color=ctx.color('text'),
              text_align='center', margin='0 0 12px'),
        props.get('title', ''),
        style(font_family=font_stack(ctx.fonts.get('body')), color=ctx.color('text'),
              text_align='center', font_size='14px', opacity='0.7', margin='0'),
        text_block(props.get('description')),
    )


def render_banner(props, ctx):
    background = css_value(props.get('backgroundColor'), ctx.color('primary'))
    text_color = css_value(props.get('textColor'), '#ffffff')
    image = sanitize_url(props.get('backgroundImage'))
    background_image = ''
    if image and image != '#' and not re.search(r"['\"()]", image):
        background_image = format_html("background-image: url('{}'); ", image)

    subheading = ''
    if props.get('subheading'):
        subheading = format_html(
            '<p style="{}">{}</p>',
            style(font_family=font_stack(ctx.fonts.get('body')), font_size='20px',
                  opacity='0.9', max_width='42rem', margin='0 0 32px'),
            props['subheading'],
        )
    button = ''
    if props.get('buttonText'):
        button = format_html(
            '<a href="{}" style="{}">{}</a>',
            sanitize_url(props.get('buttonLink')) or '#',
            style(display='inline-block', padding='12px 32px', border_radius='8px',
                  background_color='#ffffff', color=background, font_weight='600',
                  text_decoration='none'),
            props['buttonText'],
        )

    return format_html(
        '<div class="sb-banner" style="{}{}">'
        '<h1 style="{}">{}</h1>{}{}</div>',
        background_image,
        style(
            width='100%', display='flex', flex_direction='column', align_items='center',
            justify_content='center', text_align='center',
            background_color=background, background_size='cover', background_position='center',
            min_height=px(props.get('height'), '400px'), padding='60px 40px',
            color=text_color, box_sizing='border-box',
        ),
        style(font_family=font_stack(ctx.fonts.get('heading')), color=text_color,
              font_size='48px', margin='0 0 16px'),
        props.get('heading', ''),
        subheading,
        button,
    )


def render_carousel(props, ctx):
    slides = []
    for index, image in enumerate(props.get('images') or []):
        if not isinstance(image, dict):
            image = {'src': image}
        src = sanitize_url(image.get('src'))
        if not src or src == '#':
            continue
        caption = ''
        if image.get('caption'):
            caption = format_html('<figcaption>{}</figcaption>', image['caption'])
        slides.append(format_html(
            '<figure class="sb-slide"><img src="{}" alt="{}">{}</figure>',
            src, image.get('alt') or f"Slide {index + 1}", caption,
        ))
    if not slides:
        return ''
    return format_html(
        '<div class="sb-carousel" data-autoplay="{}" data-interval="{}" style="{}">{}</div>',
        'true' if as_bool(props.get('autoplay')) else 'false',
        as_int(props.get('autoplayInterval'), 3000),
        style(width=px(props.get('width'), '100%'), height=px(props.get('height'))),
        mark_safe(''.join(slides)),
    )


SOCIAL_NETWORKS = (
    ('instagramUrl', 'Instagram'),
    ('facebookUrl', 'Facebook'),
    ('twitterUrl', 'Twitter'),
    ('linkedinUrl', 'LinkedIn'),
    ('youtubeUrl', 'YouTube'),
)


def render_social(props, ctx):
    links = [
        (sanitize_url(props[key]), label)
        for key, label in SOCIAL_NETWORKS
        if props.get(key)
    ]
    if not links:
        return ''
    link_style = style(color=css_value(props.get('iconColor'), ctx.color('primary')),
                       font_size=px(props.get('iconSize'), '16px'), text_decoration='none')
    return format_html(
        '<div class="sb-social" style="{}">{}</div>',
        style(display='flex', gap=px(props.get('iconGap'), '16px'),
              justify_content={'left': 'flex-start', 'right': 'flex-end'}.get(props.get('align'), 'center')),
        format_html_join(
            '', '<a href="{}" target="_blank" rel="noopener noreferrer" style="{}" aria-label="{}">{}</a>',
            ((url, link_style, label, label) for url, label in links),
        ),
    )


LIST_FONT_SIZES = {'heading': '32px', 'title': '24px', 'subheading': '20px', 'text': '16px'}


def list_items(items):
    return format_html_join('', '<li>{}</li>', ((item_text(item),) for item in items or []))


def render_bullet_list(props, ctx):
    list_style = props.get('style') or 'bulleted'
    tag = 'ol' if list_style == 'numbered' else 'ul'
    css = style(
        text_align=props.get('align'),
        font_size=LIST_FONT_SIZES.get(props.get('textSize'), LIST_FONT_SIZES['text']),
        font_family=font_stack(ctx.fonts.get('body')),
        color=ctx.color('text'),
        list_style_type='none' if list_style == 'none' else '',
        list_style_position='inside',
        padding='0',
    )
    return format_html('<{} class="sb-list" style="{}">{}</{}>', tag, css, list_items(props.get('items')), tag)


def render_collapsible_list(props, ctx):
    show = props.get('buttonTextShow') or 'Show'
    hide = props.get('buttonTextHide') or 'Hide'
    return format_html(
        '<details class="sb-collapsible" style="{}"{}>'
        '<summary data-show="{}" data-hide="{}" style="{}">{}</summary>'
        '<ul style="{}">{}</ul></details>',
        style(text_align=props.get('align'), max_width=px(props.get('width'), '100%'),
              margin={'center': '0 auto', 'right': '0 0 0 auto'}.get(props.get('align'), '0')),
        mark_safe(' open') if as_bool(props.get('expanded')) else '',
        show,
        hide,
        style(display='inline-block', cursor='pointer', padding='8px 20px', border_radius='8px',
              background_color=ctx.color('primary'), color='#ffffff'),
        hide if as_bool(props.get('expanded')) else show,
        style(text_align='left', color=ctx.color('text'), font_family=font_stack(ctx.fonts.get('body'))),
        list_items(props.get('items')),
    )


def render_timer(props, ctx):
    target = parse_target_date(props.get('targetDate'))
    if target is None:
        return ''
    remaining = time_remaining(target, ctx.now)
    show_labels = as_bool(props.get('showLabels'), True)
    units = format_html_join(
        '',
        '<div class="sb-timer-unit"><span data-unit="{}" style="{}">{}</span>{}</div>',
        (
            (unit,
             style(font_size=px(props.get('fontSize'), '48px'), font_weight='bold', display='block'),
             f"{remaining[unit]:02d}",
             format_html('<small>{}</small>', unit.capitalize()) if show_labels else '')
            for unit in ('days', 'hours', 'minutes', 'seconds')
        ),
    )
    title = ''
    if props.get('title'):
        title = format_html('<h3 style="{}">{}</h3>',
                            style(font_family=font_stack(ctx.fonts.get('heading')), margin='0 0 16px'),
                            props['title'])
    return format_html(
        '<div class="sb-timer" data-target="{}" style="{}">{}'
        '<div style="display: flex; gap: 24px; justify-content: center">{}</div></div>',
        target.isoformat(),
        style(background_color=css_value(props.get('backgroundColor'), ctx.color('primary')),
              color=css_value(props.get('textColor'), '#ffffff'),
              padding='32px', border_radius='12px', text_align='center'),
        title,
        units,
    )


def render_footer(props, ctx):
    text_color = css_value(props.get('textColor'), '#ffffff')
    links = [
        (props.get(f'link{n}Text'), sanitize_url(props.get(f'link{n}Url')) or '#')
        for n in range(1, 7)
        if props.get(f'link{n}Text')
    ]
    socials = [
        (props.get(f'social{n}Text'), sanitize_url(props.get(f'social{n}Url')) or '#')
        for n in range(1, 7)
        if props.get(f'social{n}Text')
    ]
    link_style = style(color=text_color, text_decoration='none')
    company = props.get('companyName') or ''

    return format_html(
        '<footer class="sb-footer" style="{}">'
        '<div><h3 style="{}">{}</h3><p>{}</p></div>'
        '<nav>{}</nav><div class="sb-footer-social">{}</div>'
        '<p class="sb-footer-copy" style="opacity: 0.8">&copy; {} {}</p></footer>',
        style(width='100%', padding='32px', box_sizing='border-box',
              background_color=css_value(props.get('backgroundColor'), ctx.color('primary')),
              color=text_color, font_family=font_stack(ctx.fonts.get('body'))),
        style(font_family=font_stack(ctx.fonts.get('heading')), margin='0 0 8px'),
        company,
        text_block(props.get('description')),
        format_html_join(' ', '<a href="{}" style="{}">{}</a>',
                         ((url, link_style, text) for text, url in links)),
        format_html_join(' ', '<a href="{}" target="_blank" rel="noopener noreferrer" style="{}">{}</a>',
                         ((url, link_style, text) for text, url in socials)),
        (ctx.now or timezone.now()).year,
        company,
    )


RENDERERS = {
    'heading': render_heading,
    'text': render_text,
    'image': render_image,
    'button': render_button,
    'video': render_video,
    'divider': render_divider,
    'card': render_card,
    'banner': render_banner,
    'carousel': render_carousel,
    'social': render_social,
    'footer': render_footer,
    'bullet-list': render_bullet_list,
    'collapsible-list': render_collapsible_list,
    'timer': render_timer,
}


def render_component(component, ctx):
    if not isinstance(component, dict):
        return ''
    renderer = RENDERERS.get(component.get('type'))
    if renderer is None:
        logger.debug(f"No renderer for component type {component.get('type')!r}")
        return ''
    props = component.get('props') if isinstance(component.get('props'), dict) else {}
    return renderer(props, ctx)


def render_section(section, ctx):
    layout = section.get('layout') or {}
    css = style(
        display='flex',
        flex_direction=layout.get('direction', 'column'),
        justify_content=layout.get('justifyContent', 'flex-start'),
        align_items=layout.get('alignItems', 'center'),
        gap=px(layout.get('gap'), '16px'),
        padding=px(layout.get('padding'), '24px'),
        background_color=css_value(layout.get('backgroundColor'), 'transparent'),
    )
    children = []
    for component in section.get('components') or []:
        html = render_component(component, ctx)
        if not html:
            continue
        props = component.get('props') if isinstance(component.get('props'), dict) else {}
        full_bleed = component.get('type') in ('banner', 'footer')
        children.append(format_html(
            '<div class="sb-component" style="{}">{}</div>',
            style(width='100%' if full_bleed else px(props.get('width'), 'auto'),
                  max_width='none' if full_bleed else '100%'),
            html,
        ))
    return format_html(
        '<section id="{}" class="sb-section" style="{}">{}</section>',
        section.get('id', ''), css, mark_safe(''.join(children)),
    )


def render_sections(sections, ctx):
    ordered = sorted(
        (s for s in sections or [] if isinstance(s, dict)),
        key=lambda s: as_int(s.get('order'), 0),
    )
    return mark_safe(''.join(render_section(section, ctx) for section in ordered))


def render_legacy_content(content, ctx):
    ordered = sorted(
        (c for c in content or [] if isinstance(c, dict)),
        key=lambda c: as_int(c.get('order'), 0),
    )
    blocks = []
    for component in ordered:
        html = render_component(component, ctx)
        if html:
            blocks.append(format_html('<div class="sb-component">{}</div>', html))
    return mark_safe(''.join(blocks))
