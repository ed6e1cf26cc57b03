"""
Tests for asset uploads and the storage quota.

Run: python manage.py test apps.assets
"""
import os
from io import BytesIO
from unittest.mock import patch

from django.conf import settings
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from PIL import Image
from rest_framework import status
from rest_framework.test import APIClient

from apps.sites import services as site_services
from apps.users.models import User
from .models import Asset
from .providers import UploadResult
from .services import AssetService, parse_tags, sanitize_folder


def png_file(name='photo.png', size=(40, 30)):
    buffer = BytesIO()
    Image.new('RGB', size, color=(200, 30, 30)).save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


class SanitizeTest(TestCase):

    def test_parse_tags(self):
        self.assertEqual(parse_tags('hero, <b>banner</b>, '), ['hero', 'bbanner/b'])
        self.assertEqual(parse_tags(['a', ' b ']), ['a', 'b'])
        self.assertEqual(parse_tags(None), [])

    def test_sanitize_folder(self):
        self.assertEqual(sanitize_folder('../etc'), '___etc')
        self.assertEqual(sanitize_folder(''), 'uploads')


class AssetUploadTest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username='uploader', email='uploader@example.com', password='x')
        self.client.force_authenticate(user=self.user)

    def upload(self, file, **extra):
        return self.client.post('/api/assets/upload/', {'file': file, **extra}, format='multipart')

    def test_upload_image(self):
        response = self.upload(png_file('My Photo.png'), alt='A "red" <box>', tags='hero, banner')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data
        self.assertEqual(data['type'], 'image')
        self.assertEqual((data['width'], data['height']), (40, 30))
        self.assertEqual(data['original_name'], 'My_Photo.png')
        self.assertTrue(data['filename'].endswith('-My_Photo.png'))
        self.assertTrue(data['url'].startswith('/uploads/uploads/'))
        self.assertEqual(data['alt'], 'A red box')
        self.assertEqual(data['tags'], ['hero', 'banner'])
        self.assertTrue(data['is_public'])

        asset = Asset.objects.get(pk=data['id'])
        self.assertTrue(os.path.exists(os.path.join(settings.MEDIA_ROOT, asset.public_id)))
        self.user.refresh_from_db()
        self.assertEqual(self.user.storage_used, asset.size)

    def test_upload_to_own_site_and_folder(self):
        site = site_services.create_site(self.user, {'site_name': 'Mine', 'subdomain': 'mine'})

        response = self.upload(png_file(), site=site.id, folder='logos!', is_public='false')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['site'], site.id)
        self.assertEqual(response.data['folder'], 'logos_')
        self.assertFalse(response.data['is_public'])

    def test_svg_has_no_dimensions(self):
        svg = SimpleUploadedFile('logo.svg', b'<svg xmlns="http://www.w3.org/2000/svg"/>', content_type='image/svg+xml')

        response = self.upload(svg)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['width'])

    def test_missing_file(self):
        response = self.client.post('/api/assets/upload/', {'alt': 'nothing'}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'success': False, 'message': 'No file uploaded'})

    def test_anonymous_upload_is_rejected(self):
        response = APIClient().post('/api/assets/upload/', {'file': png_file()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_disallowed_type(self):
        pdf = SimpleUploadedFile('doc.pdf', b'%PDF-1.4', content_type='application/pdf')

        response = self.upload(pdf)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('is not allowed', response.data['message'])

    def test_mismatched_extension(self):
        response = self.upload(png_file('photo.bmp'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_double_extension_is_rejected(self):
        response = self.upload(png_file('shell.php.png'))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'File contains dangerous extension')

    def test_path_traversal_filename_is_rejected(self):
        service = AssetService(self.user)

        for name in ('../x.png', 'a/b.png', 'a\\b.png'):
            with self.assertRaisesMessage(ValueError, 'Invalid filename: path traversal detected'):
                service.validate_upload(name, 'image/png', 100)

    def test_storage_failure_stores_nothing(self):
        failed = UploadResult(success=False, error='disk full')

        with patch('apps.assets.providers.LocalStorageProvider.upload', return_value=failed):
            response = self.upload(png_file())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Failed to upload file. Please try again.')
        self.assertFalse(Asset.objects.exists())
        self.user.refresh_from_db()
        self.assertEqual(self.user.storage_used, 0)

    @override_settings(MAX_FILE_SIZE=10)
    def test_file_too_large(self):
        response = self.upload(png_file())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('File size exceeds maximum allowed size', response.data['message'])

    def test_storage_quota(self):
        self.user.storage_limit = 10
        self.user.save()

        response = self.upload(png_file())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Storage quota exceeded')
        self.assertFalse(Asset.objects.exists())


class AssetManagementTest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username='owner', email='owner@example.com', password='x')
        self.client.force_authenticate(user=self.user)

    def upload(self, name='photo.png', **extra):
        response = self.client.post('/api/assets/upload/', {'file': png_file(name), **extra}, format='multipart')
        return Asset.objects.get(pk=response.data['id'])

    def test_list_and_filters(self):
        self.upload('hero.png', alt='Hero image', folder='heroes')
        self.upload('logo.png')

        response = self.client.get('/api/assets/')
        self.assertEqual(response.data['count'], 2)

        response = self.client.get('/api/assets/', {'search': 'hero'})
        self.assertEqual([a['original_name'] for a in response.data['results']], ['hero.png'])

        response = self.client.get('/api/assets/', {'folder': 'heroes'})
        self.assertEqual(response.data['count'], 1)

        response = self.client.get('/api/assets/', {'type': 'video'})
        self.assertEqual(response.data['count'], 0)

    def test_update_only_descriptive_fields(self):
        asset = self.upload()

        response = self.client.patch(f'/api/assets/{asset.id}/', {
            'alt': 'New <alt>', 'tags': ['one', 'two'], 'is_public': False, 'size': 1,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        asset.refresh_from_db()
        self.assertEqual(asset.alt, 'New alt')
        self.assertEqual(asset.tags, ['one', 'two'])
        self.assertFalse(asset.is_public)
        self.assertNotEqual(asset.size, 1)

    def test_other_users_assets_are_hidden(self):
        asset = self.upload()
        stranger = APIClient()
        stranger.force_authenticate(user=User.objects.create_user(
            username='stranger', email='stranger@example.com', password='x'
        ))

        self.assertEqual(stranger.get(f'/api/assets/{asset.id}/').status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(stranger.delete(f'/api/assets/{asset.id}/').status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_removes_file_and_frees_storage(self):
        asset = self.upload()
        path = os.path.join(settings.MEDIA_ROOT, asset.public_id)

        response = self.client.delete(f'/api/assets/{asset.id}/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(os.path.exists(path))
        self.assertFalse(Asset.objects.filter(pk=asset.pk).exists())
        self.user.refresh_from_db()
        self.assertEqual(self.user.storage_used, 0)

    def test_storage_info(self):
        asset = self.upload()

        response = self.client.get('/api/assets/storage/info/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['used'], asset.size)
        self.assertEqual(response.data['limit'], self.user.storage_limit)
        self.assertEqual(response.data['available'], self.user.storage_limit - asset.size)
        self.assertEqual(response.data['limit_formatted'], '1.0 GB')

    def test_bulk_delete(self):
        first = self.upload('a.png')
        second = self.upload('b.png')
        keep = self.upload('c.png')

        response = self.client.delete('/api/assets/bulk-delete/', {'assetIds': [str(first.id), str(second.id)]}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['deleted_count'], 2)
        self.assertEqual(list(Asset.objects.values_list('id', flat=True)), [keep.id])

    def test_bulk_delete_requires_ids(self):
        response = self.client.delete('/api/assets/bulk-delete/', {'asset_ids': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
