import os
import shutil
import tempfile
from io import BytesIO
from unittest import mock
from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError, transaction
from django.test import TestCase, override_settings
from django.urls import reverse
from PIL import Image
from rest_framework import status
from rest_framework.test import APITestCase
from core.storage import attach_file
from .models import Announcement

User = get_user_model()
MEDIA_ROOT = tempfile.mkdtemp()


def make_image(name='banner.png'):
    buffer = BytesIO()
    Image.new('RGB', (10, 10), 'blue').save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class AttachFileTests(TestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def test_failed_save_removes_stored_file(self):
        announcement = Announcement.objects.create(title="Camp", content="Registration camp")
        with mock.patch.object(Announcement, 'save', side_effect=DatabaseError("write failed")):
            with self.assertRaises(DatabaseError):
                attach_file(announcement, 'image', make_image())
        self.assertFalse(os.path.exists(os.path.join(MEDIA_ROOT, 'announcement-images', f"{announcement.pk}.png")))
        announcement.refresh_from_db()
        self.assertFalse(announcement.image)

    def test_previous_file_kept_when_outer_transaction_rolls_back(self):
        announcement = Announcement.objects.create(title="Camp", content="Registration camp")
        with self.captureOnCommitCallbacks(execute=True):
            attach_file(announcement, 'image', make_image())
        announcement.refresh_from_db()
        first_path = announcement.image.path

        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(DatabaseError):
                with transaction.atomic():
                    attach_file(announcement, 'image', make_image('second.png'))
                    raise DatabaseError("later write failed")
        self.assertEqual(callbacks, [])
        announcement.refresh_from_db()
        self.assertEqual(announcement.image.path, first_path)
        self.assertTrue(os.path.exists(first_path))


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class AnnouncementApiTests(APITestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.staff = User.objects.create_user(username="staff", password="pass12345", is_staff=True)  # nosec B106

    def test_create_with_image(self):
        self.client.force_authenticate(user=self.staff)
        resp = self.client.post(reverse('admin-announcements-list'), {
            'title': 'Camp', 'content': 'Registration camp on Monday', 'upload_image': make_image()
        }, format='multipart')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        announcement = Announcement.objects.get(pk=resp.data['id'])
        self.assertTrue(announcement.image.name.startswith(f"announcement-images/{announcement.pk}"))
        self.assertTrue(os.path.exists(announcement.image.path))

    def test_delete_removes_image(self):
        self.client.force_authenticate(user=self.staff)
        resp = self.client.post(reverse('admin-announcements-list'), {
            'title': 'Camp', 'content': 'Registration camp', 'upload_image': make_image()
        }, format='multipart')
        announcement = Announcement.objects.get(pk=resp.data['id'])
        path = announcement.image.path
        with self.captureOnCommitCallbacks(execute=True):
            resp = self.client.delete(reverse('admin-announcements-detail', args=[announcement.pk]))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(os.path.exists(path))

    def test_active_list_hides_inactive(self):
        visible = Announcement.objects.create(title="Camp", content="Registration camp")
        hidden = Announcement.objects.create(title="Old", content="Old news")
        self.client.force_authenticate(user=self.staff)
        resp = self.client.post(reverse('admin-announcements-toggle-active', args=[hidden.pk]))
        self.assertFalse(resp.data['is_active'])

        self.client.force_authenticate(user=None)
        resp = self.client.get(reverse('active_announcements'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([a['id'] for a in resp.data], [visible.pk])

    def test_anonymous_cannot_create(self):
        resp = self.client.post(reverse('admin-announcements-list'), {
            'title': 'Camp', 'content': 'Registration camp'
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
