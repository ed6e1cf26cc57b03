"""
Section/component document model shared by the editor, the page API and
the public renderer.

A page body is an ordered list of sections:

    {
        "id": "section-hero",
        "sectionName": "Home",
        "showInNavbar": true,
        "order": 0,
        "layout": {"direction": "column", "justifyContent": "flex-start",
                   "alignItems": "center", "gap": 16, "padding": 24,
                   "backgroundColor": "transparent"},
        "components": [{"id": "heading-1", "type": "heading", "props": {...}}]
    }

Keys inside the documents stay camelCase; they are stored and returned as-is.
"""
import copy
import uuid

# Types the public renderer knows how to draw
RENDERABLE_TYPES = (
    'heading', 'text', 'image', 'button', 'video', 'divider', 'card', 'banner',
    'carousel', 'social', 'footer', 'bullet-list', 'collapsible-list', 'timer',
)

COMPONENT_TYPES = RENDERABLE_TYPES + (
    'embed', 'layout', 'form', 'spacer', 'youtube', 'map', 'gallery', 'code',
)

LAYOUT_DIRECTIONS = ('row', 'column')
JUSTIFY_CONTENT_VALUES = (
    'flex-start', 'center', 'flex-end', 'space-between', 'space-around', 'space-evenly',
)
ALIGN_ITEMS_VALUES = ('flex-start', 'center', 'flex-end', 'stretch', 'baseline')

DEFAULT_LAYOUT = {
    'direction': 'column',
    'justifyContent': 'flex-start',
    'alignItems': 'center',
    'gap': 16,
    'padding': 24,
    'backgroundColor': 'transparent',
}


class SchemaError(ValueError):
    """Raised for malformed sections or components."""


def new_id(prefix):
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def default_layout():
    return dict(DEFAULT_LAYOUT)


def _non_negative_int(name, value):
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise SchemaError(f"Layout {name} must be a number")
    if number < 0:
        raise SchemaError(f"Layout {name} cannot be negative")
    return number


def normalize_layout(layout=None):
    if layout is None:
        layout = {}
    if not isinstance(layout, dict):
        raise SchemaError('Section layout must be an object')

    merged = {**DEFAULT_LAYOUT, **layout}
    if merged['direction'] not in LAYOUT_DIRECTIONS:
        raise SchemaError(f"Invalid layout direction: {merged['direction']}")
    if merged['justifyContent'] not in JUSTIFY_CONTENT_VALUES:
        raise SchemaError(f"Invalid justifyContent: {merged['justifyContent']}")
    if merged['alignItems'] not in ALIGN_ITEMS_VALUES:
        raise SchemaError(f"Invalid alignItems: {merged['alignItems']}")
    merged['gap'] = _non_negative_int('gap', merged['gap'])
    merged['padding'] = _non_negative_int('padding', merged['padding'])
    merged['backgroundColor'] = str(merged['backgroundColor'] or 'transparent')
    return merged


def normalize_component(data):
    if not isinstance(data, dict):
        raise SchemaError('Component must be an object')

    component_type = data.get('type')
    if component_type not in COMPONENT_TYPES:
        raise SchemaError(f"Unknown component type: {component_type}")

    props = data.get('props') or {}
    styles = data.get('styles') or {}
    if not isinstance(props, dict):
        raise SchemaError(f"Component props must be an object ({component_type})")
    if not isinstance(styles, dict):
        raise SchemaError(f"Component styles must be an object ({component_type})")

    component = copy.deepcopy(data)
    component['id'] = str(data.get('id') or new_id(component_type))
    component['props'] = copy.deepcopy(props)
    component['styles'] = copy.deepcopy(styles)
    return component


def normalize_section(data, order=0):
    if not isinstance(data, dict):
        raise SchemaError('Section must be an object')

    components = data.get('components') or []
    if not isinstance(components, list):
        raise SchemaError('Section components must be a list')

    section = copy.deepcopy(data)
    section['id'] = str(data.get('id') or new_id('section'))
    section['components'] = [normalize_component(component) for component in components]
    section['layout'] = normalize_layout(data.get('layout'))
    section['sectionName'] = str(data.get('sectionName') or '')
    section['showInNavbar'] = bool(data.get('showInNavbar', True))
    section['order'] = order
    return section


def normalize_sections(sections):
    """Normalize a page body and renumber `order` from zero."""
    if sections is None:
        return []
    if not isinstance(sections, list):
        raise SchemaError('Sections must be a list')

    normalized = [normalize_section(section, index) for index, section in enumerate(sections)]

    section_ids = set()
    component_ids = set()
    for section in normalized:
        if section['id'] in section_ids:
            raise SchemaError(f"Duplicate section id: {section['id']}")
        section_ids.add(section['id'])
        for component in section['components']:
            if component['id'] in component_ids:
                raise SchemaError(f"Duplicate component id: {component['id']}")
            component_ids.add(component['id'])
    return normalized


def normalize_content(content):
    """Legacy flat component list."""
    if content is None:
        return []
    if not isinstance(content, list):
        raise SchemaError('Content must be a list')
    return [normalize_component(component) for component in content]


def sections_from_content(content):
    """
    Convert the legacy flat component list into one section per component.
    """
    components = sorted(
        normalize_content(content),
        key=lambda component: component.get('order', 0) or 0
    )
    return [
        normalize_section({
            'id': f"section-{component['id']}",
            'components': [component],
            'layout': default_layout(),
        }, index)
        for index, component in enumerate(components)
    ]


def is_footer_section(section):
    return any(component.get('type') == 'footer' for component in section.get('components', []))
