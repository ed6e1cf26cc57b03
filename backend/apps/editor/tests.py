"""
Tests for the section schema, the editor state and editor sessions.

Run: python manage.py test apps.editor
"""
from django.core.cache import cache
from django.test import TestCase, SimpleTestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from apps.sites import services
from apps.users.models import User
from .schema import SchemaError, normalize_section, normalize_sections, sections_from_content
from .store import EditorState, EditorError


def component(component_id, component_type='text', **props):
    return {'id': component_id, 'type': component_type, 'props': props}


def section(section_id, *components, **extra):
    return {'id': section_id, 'components': list(components), **extra}


class SchemaTest(SimpleTestCase):

    def test_section_defaults(self):
        result = normalize_section({'components': [{'type': 'heading'}]}, order=3)

        self.assertTrue(result['id'].startswith('section-'))
        self.assertEqual(result['order'], 3)
        self.assertEqual(result['sectionName'], '')
        self.assertTrue(result['showInNavbar'])
        self.assertEqual(result['layout']['gap'], 16)
        self.assertTrue(result['components'][0]['id'].startswith('heading-'))
        self.assertEqual(result['components'][0]['props'], {})

    def test_layout_is_validated(self):
        with self.assertRaises(SchemaError):
            normalize_section({'layout': {'direction': 'diagonal'}})
        with self.assertRaises(SchemaError):
            normalize_section({'layout': {'gap': -4}})

    def test_duplicate_ids_are_rejected(self):
        with self.assertRaises(SchemaError):
            normalize_sections([section('a'), section('a')])
        with self.assertRaises(SchemaError):
            normalize_sections([section('a', component('c1')), section('b', component('c1'))])

    def test_sections_from_legacy_content(self):
        result = sections_from_content([
            {'id': 'second', 'type': 'text', 'order': 1},
            {'id': 'first', 'type': 'heading', 'order': 0},
        ])

        self.assertEqual([s['id'] for s in result], ['section-first', 'section-second'])
        self.assertEqual([s['order'] for s in result], [0, 1])
        self.assertEqual(result[0]['layout']['direction'], 'column')


@override_settings(EDITOR_HISTORY_LIMIT=100)
class EditorStateTest(SimpleTestCase):

    def make_state(self, *sections, history_limit=None):
        return EditorState(page_id=1, site_id=1, sections=normalize_sections(list(sections)),
                           history_limit=history_limit)

    def test_new_section_goes_before_footer(self):
        state = self.make_state(
            section('hero', component('h1', 'heading')),
            section('bottom', component('f1', 'footer')),
        )

        state.add_section(section('middle', component('t1')))

        self.assertEqual([s['id'] for s in state.sections], ['hero', 'middle', 'bottom'])
        self.assertEqual([s['order'] for s in state.sections], [0, 1, 2])
        self.assertTrue(state.is_dirty)

    def test_new_section_appends_without_footer(self):
        state = self.make_state(section('hero', component('h1', 'heading')))
        state.add_section(section('next'))
        self.assertEqual(state.sections[-1]['id'], 'next')

    def test_explicit_index(self):
        state = self.make_state(section('a'), section('b'))
        state.add_section(section('first'), index=0)
        self.assertEqual([s['id'] for s in state.sections], ['first', 'a', 'b'])

    def test_undo_redo(self):
        state = self.make_state(section('a'))
        state.add_section(section('b'))
        state.add_section(section('c'))

        self.assertTrue(state.undo())
        self.assertEqual([s['id'] for s in state.sections], ['a', 'b'])
        self.assertTrue(state.undo())
        self.assertFalse(state.undo())
        self.assertEqual([s['id'] for s in state.sections], ['a'])

        self.assertTrue(state.redo())
        self.assertEqual([s['id'] for s in state.sections], ['a', 'b'])
        self.assertTrue(state.can_redo)

    def test_mutation_after_undo_drops_redo_branch(self):
        state = self.make_state(section('a'))
        state.add_section(section('b'))
        state.undo()

        state.add_section(section('c'))

        self.assertFalse(state.can_redo)
        self.assertEqual(len(state.history), 2)
        self.assertEqual([s['id'] for s in state.sections], ['a', 'c'])

    def test_undo_restores_a_copy(self):
        state = self.make_state(section('a', component('t1', text='one')))
        state.update_component('t1', {'props': {'text': 'two'}})
        state.undo()

        state.sections[0]['components'][0]['props']['text'] = 'mutated'
        state.redo()
        state.undo()

        self.assertEqual(state.sections[0]['components'][0]['props']['text'], 'one')

    def test_history_is_capped(self):
        state = self.make_state(history_limit=3)
        for name in ('a', 'b', 'c', 'd'):
            state.add_section(section(name))

        self.assertEqual(len(state.history), 3)
        self.assertEqual(state.history_index, 2)
        self.assertEqual([s['id'] for s in state.history[0]], ['a', 'b'])

    def test_update_section_merges_layout(self):
        state = self.make_state(section('a', layout={'gap': 8}))

        state.update_section('a', {'layout': {'direction': 'row'}, 'sectionName': 'Intro'})

        updated = state.find_section('a')
        self.assertEqual(updated['layout']['direction'], 'row')
        self.assertEqual(updated['layout']['gap'], 8)
        self.assertEqual(updated['sectionName'], 'Intro')

    def test_update_component_merges_props(self):
        state = self.make_state(section('a', component('b1', 'button', text='Go', link='/x')))

        state.update_component('b1', {'props': {'text': 'Start'}})

        self.assertEqual(state.find_component('b1')['props'], {'text': 'Start', 'link': '/x'})

    def test_delete_component_removes_empty_section(self):
        state = self.make_state(
            section('a', component('t1'), component('t2')),
            section('b', component('t3')),
        )
        state.select_component('t3')

        state.delete_component('t1')
        state.delete_component('t3')

        self.assertEqual([s['id'] for s in state.sections], ['a'])
        self.assertEqual([c['id'] for c in state.sections[0]['components']], ['t2'])
        self.assertIsNone(state.selected_component_id)

    def test_reorder_sections_and_components(self):
        state = self.make_state(
            section('a', component('t1'), component('t2')),
            section('b'),
        )

        state.reorder_sections(['b', 'a'])
        state.reorder_components_in_section('a', ['t2', 't1'])

        self.assertEqual([s['id'] for s in state.sections], ['b', 'a'])
        self.assertEqual([s['order'] for s in state.sections], [0, 1])
        self.assertEqual([c['id'] for c in state.find_section('a')['components']], ['t2', 't1'])

        with self.assertRaises(SchemaError):
            state.reorder_sections(['a'])

    def test_move_component(self):
        state = self.make_state(
            section('a', component('t1')),
            section('b', component('t2')),
        )

        state.move_component('t1', 'b', index=0)

        self.assertEqual([s['id'] for s in state.sections], ['b'])
        self.assertEqual([c['id'] for c in state.sections[0]['components']], ['t1', 't2'])

    def test_legacy_add_component(self):
        state = self.make_state(section('a'))
        state.add_component(component('img', 'image', src='/uploads/a.png'))

        self.assertEqual(state.sections[-1]['id'], 'section-img')

    def test_unknown_ids_raise(self):
        state = self.make_state(section('a', component('t1')))

        with self.assertRaises(EditorError):
            state.delete_section('missing')
        with self.assertRaises(EditorError):
            state.update_component('missing', {})
        with self.assertRaises(EditorError):
            state.select_section('missing')

    def test_duplicate_component_id_rejected(self):
        state = self.make_state(section('a', component('t1')))
        with self.assertRaises(SchemaError):
            state.add_component_to_section('a', component('t1'))

    def test_selection_is_not_history(self):
        state = self.make_state(section('a', component('t1')))
        state.select_component('t1')
        state.select_section('a')

        self.assertEqual(len(state.history), 1)
        self.assertFalse(state.is_dirty)

    def test_apply_validates_operations(self):
        state = self.make_state(section('a'))

        with self.assertRaises(SchemaError):
            state.apply({'op': 'explode'})
        with self.assertRaises(SchemaError):
            state.apply({'op': 'delete_section'})

        state.apply({'op': 'add_component_to_section', 'section_id': 'a',
                     'component': component('t1'), 'index': '0'})
        self.assertEqual(state.find_component('t1')['type'], 'text')

    def test_round_trip_through_dict(self):
        state = self.make_state(section('a'))
        state.add_section(section('b'))
        state.undo()

        restored = EditorState.from_dict(state.to_dict())

        self.assertEqual(restored.summary(), state.summary())
        self.assertTrue(restored.redo())


class EditorApiTest(TestCase):

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.user = User.objects.create_user(username='editor', email='editor@example.com', password='x')
        self.client.force_authenticate(user=self.user)
        self.site = services.create_site(self.user, {'site_name': 'Editor Site', 'subdomain': 'editor-site'})
        self.page = self.site.pages.get()
        self.page.content = [{'id': 'legacy', 'type': 'heading', 'props': {'text': 'Old'}}]
        self.page.save()
        self.url = f'/api/pages/{self.page.id}/editor/'

    def test_open_session_converts_legacy_content(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([s['id'] for s in response.data['sections']], ['section-legacy'])
        self.assertEqual(response.data['history_length'], 1)
        self.assertFalse(response.data['can_undo'])
        self.assertFalse(response.data['is_dirty'])

    def test_operations_undo_redo_and_save(self):
        response = self.client.post(f'{self.url}operations/', {'operations': [
            {'op': 'add_section', 'section': section('hero', component('h1', 'heading', text='Hi'))},
            {'op': 'update_component', 'component_id': 'h1', 'updates': {'props': {'text': 'Hello'}}},
        ]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['history_length'], 3)
        self.assertTrue(response.data['is_dirty'])

        response = self.client.post(f'{self.url}undo/')
        self.assertEqual(response.data['history_index'], 1)
        self.assertTrue(response.data['can_redo'])

        response = self.client.post(f'{self.url}redo/')
        self.assertEqual(response.data['history_index'], 2)

        response = self.client.post(f'{self.url}save/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_dirty'])

        self.page.refresh_from_db()
        self.assertEqual([s['id'] for s in self.page.sections], ['section-legacy', 'hero'])
        self.assertEqual(self.page.sections[1]['components'][0]['props']['text'], 'Hello')

    def test_failed_batch_stores_nothing(self):
        self.client.get(self.url)

        response = self.client.post(f'{self.url}operations/', {'operations': [
            {'op': 'add_section', 'section': section('ok')},
            {'op': 'delete_section', 'section_id': 'missing'},
        ]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Section not found: missing')
        state = self.client.get(self.url).data
        self.assertEqual(state['history_length'], 1)

    def test_unknown_operation(self):
        response = self.client.post(f'{self.url}operations/', {'operations': [{'op': 'explode'}]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Unknown operation: explode')

    def test_discard_session(self):
        self.client.post(f'{self.url}operations/', {'operations': [
            {'op': 'add_section', 'section': section('hero')},
        ]}, format='json')

        response = self.client.delete(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        state = self.client.get(self.url).data
        self.assertEqual([s['id'] for s in state['sections']], ['section-legacy'])

    def test_only_owner_can_edit(self):
        stranger = APIClient()
        stranger.force_authenticate(user=User.objects.create_user(
            username='stranger', email='stranger@example.com', password='x'
        ))
        self.assertEqual(stranger.get(self.url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(APIClient().get(self.url).status_code, status.HTTP_401_UNAUTHORIZED)
