"""
In-memory editor state for one page: the section list plus a linear
undo/redo history of section snapshots.

The state is a plain object so it can be pickled into the cache between
requests (see sessions.py) and exercised directly in tests.
"""
import copy
import logging

from django.conf import settings

from .schema import (
    SchemaError, normalize_component, normalize_layout, normalize_section,
    normalize_sections, sections_from_content, is_footer_section, default_layout,
)

logger = logging.getLogger(__name__)


class EditorError(LookupError):
    """Raised when an operation names a section or component that does not exist."""


class EditorState:
    """
    Sections of the page being edited and their history.

    Every mutation drops the redo branch, appends a snapshot of the new
    sections and marks the state dirty. `history_limit` caps the number of
    snapshots kept; the oldest go first.
    """

    def __init__(self, page_id=None, site_id=None, sections=None, content=None, history_limit=None):
        self.page_id = page_id
        self.site_id = site_id
        self.sections = copy.deepcopy(sections or [])
        self.content = copy.deepcopy(content or [])
        self.history = [copy.deepcopy(self.sections)]
        self.history_index = 0
        self.history_limit = max(1, history_limit or settings.EDITOR_HISTORY_LIMIT)
        self.selected_component_id = None
        self.selected_section_id = None
        self.is_dirty = False

    def __repr__(self):
        return f"<EditorState page={self.page_id} sections={len(self.sections)} history={self.history_index + 1}/{len(self.history)}>"

    # History

    def _commit(self, sections):
        for index, section in enumerate(sections):
            section['order'] = index

        self.sections = sections
        self.history = self.history[:self.history_index + 1]
        self.history.append(copy.deepcopy(sections))

        overflow = len(self.history) - self.history_limit
        if overflow > 0:
            self.history = self.history[overflow:]
        self.history_index = len(self.history) - 1
        self.is_dirty = True

    @property
    def can_undo(self):
        return self.history_index > 0

    @property
    def can_redo(self):
        return self.history_index < len(self.history) - 1

    def undo(self):
        if not self.can_undo:
            return False
        self.history_index -= 1
        self.sections = copy.deepcopy(self.history[self.history_index])
        self.is_dirty = True
        return True

    def redo(self):
        if not self.can_redo:
            return False
        self.history_index += 1
        self.sections = copy.deepcopy(self.history[self.history_index])
        self.is_dirty = True
        return True

    def mark_saved(self):
        self.is_dirty = False

    # Lookups

    def _working_copy(self):
        return copy.deepcopy(self.sections)

    @staticmethod
    def _section_index(sections, section_id):
        for index, section in enumerate(sections):
            if section['id'] == section_id:
                return index
        raise EditorError(f"Section not found: {section_id}")

    @staticmethod
    def _component_position(sections, component_id):
        for section_index, section in enumerate(sections):
            for component_index, component in enumerate(section['components']):
                if component['id'] == component_id:
                    return section_index, component_index
        raise EditorError(f"Component not found: {component_id}")

    def _check_unique_ids(self, sections, section=None, component=None):
        section_ids = {s['id'] for s in sections}
        component_ids = {c['id'] for s in sections for c in s['components']}

        if section is not None:
            if section['id'] in section_ids:
                raise SchemaError(f"Duplicate section id: {section['id']}")
            new_components = section['components']
        else:
            new_components = [component]

        for item in new_components:
            if item['id'] in component_ids:
                raise SchemaError(f"Duplicate component id: {item['id']}")
            component_ids.add(item['id'])

    @staticmethod
    def _insert_at(items, item, index):
        if index is None:
            items.append(item)
        else:
            position = max(0, min(int(index), len(items)))
            items.insert(position, item)

    def find_section(self, section_id):
        return self.sections[self._section_index(self.sections, section_id)]

    def find_component(self, component_id):
        section_index, component_index = self._component_position(self.sections, component_id)
        return self.sections[section_index]['components'][component_index]

    # Loading

    def load_page(self, page):
        """Start editing `page`; legacy flat content becomes one section per component."""
        self.page_id = page.pk
        self.site_id = page.site_id
        self.content = copy.deepcopy(page.content or [])
        if page.sections:
            self.sections = normalize_sections(page.sections)
        else:
            self.sections = sections_from_content(self.content)

        self.history = [copy.deepcopy(self.sections)]
        self.history_index = 0
        self.selected_component_id = None
        self.selected_section_id = None
        self.is_dirty = False
        return self

    # Sections

    def add_section(self, section=None, index=None):
        sections = self._working_copy()
        new_section = normalize_section(section or {'layout': default_layout()})
        self._check_unique_ids(sections, section=new_section)

        if index is None:
            footer_index = next(
                (i for i, existing in enumerate(sections) if is_footer_section(existing)),
                None
            )
            self._insert_at(sections, new_section, footer_index)
        else:
            self._insert_at(sections, new_section, index)

        self._commit(sections)
        return new_section['id']

    def update_section(self, section_id, updates):
        if not isinstance(updates, dict):
            raise SchemaError('Section updates must be an object')

        sections = self._working_copy()
        index = self._section_index(sections, section_id)
        current = sections[index]

        merged = {**current, **updates, 'id': current['id']}
        if 'layout' in updates:
            if not isinstance(updates['layout'], dict):
                raise SchemaError('Section layout must be an object')
            merged['layout'] = normalize_layout({**current['layout'], **updates['layout']})
        if 'components' in updates:
            merged['components'] = updates['components']
            others = sections[:index] + sections[index + 1:]
            sections[index] = normalize_section(merged, index)
            self._check_unique_ids(others, section=sections[index])
        else:
            sections[index] = normalize_section(merged, index)

        self._commit(sections)

    def delete_section(self, section_id):
        sections = self._working_copy()
        removed = sections.pop(self._section_index(sections, section_id))

        if self.selected_section_id == section_id:
            self.selected_section_id = None
        if self.selected_component_id in {c['id'] for c in removed['components']}:
            self.selected_component_id = None
        self._commit(sections)

    def reorder_sections(self, section_ids):
        if not isinstance(section_ids, list):
            raise SchemaError('section_ids must be a list')

        sections = self._working_copy()
        by_id = {section['id']: section for section in sections}
        for section_id in section_ids:
            if section_id not in by_id:
                raise EditorError(f"Section not found: {section_id}")
        if len(section_ids) != len(sections) or len(set(section_ids)) != len(section_ids):
            raise SchemaError('section_ids must list every section exactly once')

        self._commit([by_id[section_id] for section_id in section_ids])

    # Components

    def add_component_to_section(self, section_id, component, index=None):
        sections = self._working_copy()
        section = sections[self._section_index(sections, section_id)]
        new_component = normalize_component(component)
        self._check_unique_ids(sections, component=new_component)

        self._insert_at(section['components'], new_component, index)
        self._commit(sections)
        return new_component['id']

    def add_component(self, component):
        """Legacy path: the component gets a section of its own at the end."""
        new_component = normalize_component(component)
        return self.add_section({
            'id': f"section-{new_component['id']}",
            'components': [new_component],
            'layout': default_layout(),
        }, index=len(self.sections))

    def update_component(self, component_id, updates):
        if not isinstance(updates, dict):
            raise SchemaError('Component updates must be an object')

        sections = self._working_copy()
        section_index, component_index = self._component_position(sections, component_id)
        current = sections[section_index]['components'][component_index]

        merged = {**current, **updates, 'id': current['id']}
        for key in ('props', 'styles'):
            if key in updates:
                if not isinstance(updates[key], dict):
                    raise SchemaError(f"Component {key} must be an object")
                merged[key] = {**current.get(key, {}), **updates[key]}

        sections[section_index]['components'][component_index] = normalize_component(merged)
        self._commit(sections)

    def delete_component(self, component_id, section_id=None):
        """Remove a component; a section left without components goes too."""
        sections = self._working_copy()
        section_index, component_index = self._component_position(sections, component_id)
        if section_id is not None and sections[section_index]['id'] != section_id:
            raise EditorError(f"Component {component_id} is not in section {section_id}")

        section = sections[section_index]
        section['components'].pop(component_index)
        if not section['components']:
            sections.pop(section_index)
            if self.selected_section_id == section['id']:
                self.selected_section_id = None

        if self.selected_component_id == component_id:
            self.selected_component_id = None
        self._commit(sections)

    def reorder_components_in_section(self, section_id, component_ids):
        if not isinstance(component_ids, list):
            raise SchemaError('component_ids must be a list')

        sections = self._working_copy()
        section = sections[self._section_index(sections, section_id)]
        by_id = {component['id']: component for component in section['components']}
        for component_id in component_ids:
            if component_id not in by_id:
                raise EditorError(f"Component not found in section {section_id}: {component_id}")
        if len(component_ids) != len(by_id) or len(set(component_ids)) != len(component_ids):
            raise SchemaError('component_ids must list every component of the section exactly once')

        section['components'] = [by_id[component_id] for component_id in component_ids]
        self._commit(sections)

    def move_component(self, component_id, target_section_id, index=None):
        """Move a component into another section (or within its own)."""
        sections = self._working_copy()
        target = sections[self._section_index(sections, target_section_id)]
        section_index, component_index = self._component_position(sections, component_id)

        source = sections[section_index]
        component = source['components'].pop(component_index)
        self._insert_at(target['components'], component, index)

        if not source['components']:
            sections.pop(section_index)
        self._commit(sections)

    # Selection

    def select_component(self, component_id=None):
        if component_id is not None:
            self.find_component(component_id)
        self.selected_component_id = component_id

    def select_section(self, section_id=None):
        if section_id is not None:
            self.find_section(section_id)
        self.selected_section_id = section_id

    # Batch operations

    # op name -> (method, required args, optional args)
    OPERATIONS = {
        'add_section': ('add_section', (), ('section', 'index')),
        'update_section': ('update_section', ('section_id', 'updates'), ()),
        'delete_section': ('delete_section', ('section_id',), ()),
        'reorder_sections': ('reorder_sections', ('section_ids',), ()),
        'add_component': ('add_component', ('component',), ()),
        'add_component_to_section': ('add_component_to_section', ('section_id', 'component'), ('index',)),
        'update_component': ('update_component', ('component_id', 'updates'), ()),
        'delete_component': ('delete_component', ('component_id',), ('section_id',)),
        'reorder_components_in_section': (
            'reorder_components_in_section', ('section_id', 'component_ids'), ()
        ),
        'move_component': ('move_component', ('component_id', 'target_section_id'), ('index',)),
        'select_component': ('select_component', (), ('component_id',)),
        'select_section': ('select_section', (), ('section_id',)),
        'undo': ('undo', (), ()),
        'redo': ('redo', (), ()),
    }

    def apply(self, operation):
        """
        Apply one {"op": name, ...args} operation.

        Raises SchemaError for a malformed operation and EditorError for
        unknown ids.
        """
        if not isinstance(operation, dict):
            raise SchemaError('Operation must be an object')

        name = operation.get('op')
        if name not in self.OPERATIONS:
            raise SchemaError(f"Unknown operation: {name}")

        method_name, required, optional = self.OPERATIONS[name]
        missing = [arg for arg in required if arg not in operation]
        if missing:
            raise SchemaError(f"{name} requires: {', '.join(missing)}")

        kwargs = {arg: operation[arg] for arg in required}
        kwargs.update({arg: operation[arg] for arg in optional if arg in operation})
        if kwargs.get('index') is not None:
            try:
                kwargs['index'] = int(kwargs['index'])
            except (TypeError, ValueError):
                raise SchemaError('index must be a number')

        return getattr(self, method_name)(**kwargs)

    def apply_all(self, operations):
        if not isinstance(operations, list):
            raise SchemaError('operations must be a list')
        for operation in operations:
            self.apply(operation)
        return self

    # Serialization

    def summary(self):
        return {
            'page_id': self.page_id,
            'site_id': self.site_id,
            'sections': self.sections,
            'history_index': self.history_index,
            'history_length': len(self.history),
            'can_undo': self.can_undo,
            'can_redo': self.can_redo,
            'is_dirty': self.is_dirty,
            'selected_component_id': self.selected_component_id,
            'selected_section_id': self.selected_section_id,
        }

    def to_dict(self):
        return {
            **self.summary(),
            'content': self.content,
            'history': self.history,
            'history_limit': self.history_limit,
        }

    @classmethod
    def from_dict(cls, data):
        state = cls(
            page_id=data.get('page_id'),
            site_id=data.get('site_id'),
            sections=data.get('sections'),
            content=data.get('content'),
            history_limit=data.get('history_limit'),
        )
        history = data.get('history')
        if history:
            state.history = copy.deepcopy(history)
            state.history_index = min(max(0, data.get('history_index', 0)), len(history) - 1)
        state.selected_component_id = data.get('selected_component_id')
        state.selected_section_id = data.get('selected_section_id')
        state.is_dirty = bool(data.get('is_dirty'))
        return state
