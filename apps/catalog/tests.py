import os
import shutil
import tempfile
from datetime import timedelta
from decimal import Decimal
from io import BytesIO
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from PIL import Image
from rest_framework import status
from rest_framework.test import APITestCase
from apps.management.models import ManagementLog
from apps.registrations.models import Registration
from .models import Category, SubCategory, Program
from .selectors import get_public_categories, get_category_programs

User = get_user_model()
MEDIA_ROOT = tempfile.mkdtemp()


def make_image(name='qr.png'):
    buffer = BytesIO()
    Image.new('RGB', (10, 10), 'white').save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


class CategoryModelTests(TestCase):
    def setUp(self):
        self.now = timezone.now()
        self.category = Category.objects.create(
            name_english="Job Card Scheme", name_malayalam="ജോബ് കാർഡ്",
            actual_fee=Decimal('1000'), offer_fee=Decimal('499')
        )

    def test_offer_without_window_is_active(self):
        self.assertTrue(self.category.is_offer_active(self.now))
        self.assertIsNone(self.category.offer_days_remaining(self.now))

    def test_offer_window(self):
        self.category.offer_start_date = self.now - timedelta(days=1)
        self.category.offer_end_date = self.now + timedelta(days=1, hours=12)
        self.assertTrue(self.category.is_offer_active(self.now))
        self.assertEqual(self.category.offer_days_remaining(self.now), 2)
        self.assertFalse(self.category.is_offer_active(self.now + timedelta(days=3)))
        self.assertFalse(self.category.is_offer_active(self.now - timedelta(days=2)))

    def test_display_fee_prefers_lower_offer(self):
        self.assertEqual(self.category.display_fee, Decimal('499'))
        self.category.offer_fee = Decimal('1500')
        self.assertEqual(self.category.display_fee, Decimal('1000'))
        self.category.offer_fee = Decimal('0')
        self.assertEqual(self.category.display_fee, Decimal('1000'))

    def test_job_card_detection(self):
        self.assertTrue(self.category.is_job_card)
        self.assertFalse(Category(name_english="Tailoring").is_job_card)


class CatalogSelectorTests(TestCase):
    def setUp(self):
        cache.clear()
        self.category = Category.objects.create(name_english="Tailoring", name_malayalam="തയ്യൽ")

    def test_public_categories_reflect_new_rows(self):
        self.assertEqual(get_public_categories(), [self.category])
        newer = Category.objects.create(name_english="Agriculture", name_malayalam="കൃഷി")
        self.assertEqual(get_public_categories(), [newer, self.category])

    def test_category_programs_order_and_visibility(self):
        low = Program.objects.create(category=self.category, name="Embroidery", priority=1)
        high = Program.objects.create(category=self.category, name="Stitching", priority=9)
        featured = Program.objects.create(category=self.category, name="Boutique", priority=0, is_top=True)
        Program.objects.create(category=self.category, name="Old", priority=50, is_active=False)
        self.assertEqual(get_category_programs(self.category.pk), [featured, high, low])

        low.is_active = False
        low.save()
        self.assertEqual(get_category_programs(self.category.pk), [featured, high])


class PublicCatalogApiTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.active = Category.objects.create(name_english="Tailoring", name_malayalam="തയ്യൽ")
        self.inactive = Category.objects.create(name_english="Agriculture", name_malayalam="കൃഷി", is_active=False)
        self.hidden = Category.objects.create(name_english="Pennyekart Free Registration", name_malayalam="പെന്നി")

    def test_public_categories_include_inactive(self):
        resp = self.client.get(reverse('public_categories'))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        names = [c['name_english'] for c in resp.data]
        self.assertEqual(names, ["Agriculture", "Pennyekart Free Registration", "Tailoring"])
        self.assertIn('is_offer_active', resp.data[0])

    @override_settings(HIDDEN_CATEGORY_NAMES=["Pennyekart Free Registration"])
    def test_selectable_categories_only_active_and_visible(self):
        resp = self.client.get(reverse('selectable_categories'))
        self.assertEqual([c['id'] for c in resp.data], [self.active.pk])

    def test_category_programs(self):
        program = Program.objects.create(category=self.active, name="Stitching")
        resp = self.client.get(reverse('category_programs', args=[self.active.pk]))
        self.assertEqual([p['id'] for p in resp.data], [program.pk])
        resp = self.client.get(reverse('category_programs', args=[9999]))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)


class AdminCatalogApiTests(APITestCase):
    def setUp(self):
        self.staff = User.objects.create_user(username="staff", password="pass12345", is_staff=True)  # nosec B106
        self.client.force_authenticate(user=self.staff)
        self.category = Category.objects.create(name_english="Driving Jobs", name_malayalam="ഡ്രൈവിംഗ്")

    def test_create_category_requires_both_names(self):
        resp = self.client.post(reverse('admin-categories-list'), {
            'name_english': 'Tailoring', 'name_malayalam': ''
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('name_malayalam', resp.data)

    def test_create_category_logs_action(self):
        resp = self.client.post(reverse('admin-categories-list'), {
            'name_english': 'Tailoring', 'name_malayalam': 'തയ്യൽ',
            'actual_fee': '500.00', 'offer_fee': '299.00', 'expiry_days': 45
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['expiry_days'], 45)
        self.assertTrue(ManagementLog.objects.filter(action='create', admin=self.staff).exists())

    def test_offer_window_must_be_ordered(self):
        now = timezone.now()
        resp = self.client.patch(reverse('admin-categories-detail', args=[self.category.pk]), {
            'offer_start_date': (now + timedelta(days=5)).isoformat(),
            'offer_end_date': now.isoformat(),
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_toggle_active(self):
        resp = self.client.post(reverse('admin-categories-toggle-active', args=[self.category.pk]))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.data['is_active'])
        self.category.refresh_from_db()
        self.assertFalse(self.category.is_active)

    def test_delete_category_with_children_is_refused(self):
        SubCategory.objects.create(category=self.category, name="Heavy Vehicles")
        resp = self.client.delete(reverse('admin-categories-detail', args=[self.category.pk]))
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Category.objects.filter(pk=self.category.pk).exists())

    def test_delete_empty_category(self):
        resp = self.client.delete(reverse('admin-categories-detail', args=[self.category.pk]))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Category.objects.filter(pk=self.category.pk).exists())
        self.assertTrue(ManagementLog.objects.filter(action='delete').exists())

    def test_delete_program_with_registrations_is_refused(self):
        program = Program.objects.create(category=self.category, name="Driving")
        Registration.objects.create(full_name="Anu", mobile_number="9876543210", category=self.category, program=program)
        resp = self.client.delete(reverse('admin-programs-detail', args=[program.pk]))
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Program.objects.filter(pk=program.pk).exists())

    def test_program_sub_category_must_match_category(self):
        other = Category.objects.create(name_english="Tailoring", name_malayalam="തയ്യൽ")
        sub_category = SubCategory.objects.create(category=other, name="Stitching")
        resp = self.client.post(reverse('admin-programs-list'), {
            'category_id': self.category.pk,
            'sub_category_id': sub_category.pk,
            'name': 'Driving',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sub_category_id', resp.data)

    def test_program_list_filtered_by_category(self):
        other = Category.objects.create(name_english="Tailoring", name_malayalam="തയ്യൽ")
        low = Program.objects.create(category=self.category, name="Driving", priority=1)
        high = Program.objects.create(category=self.category, name="Delivery", priority=5)
        Program.objects.create(category=other, name="Stitching")
        resp = self.client.get(reverse('admin-programs-list'), {'category': self.category.pk})
        self.assertEqual([p['id'] for p in resp.data], [high.pk, low.pk])

    def test_sub_categories_filtered_and_ordered(self):
        b = SubCategory.objects.create(category=self.category, name="Two Wheeler")
        a = SubCategory.objects.create(category=self.category, name="Heavy Vehicles")
        resp = self.client.get(reverse('admin-sub-categories-list'), {'category': self.category.pk})
        self.assertEqual([s['id'] for s in resp.data], [a.pk, b.pk])

    def test_non_staff_cannot_manage_catalog(self):
        user = User.objects.create_user(username="customer", password="pass12345")  # nosec B106
        self.client.force_authenticate(user=user)
        resp = self.client.post(reverse('admin-categories-list'), {
            'name_english': 'Tailoring', 'name_malayalam': 'തയ്യൽ'
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class CategoryQRUploadTests(APITestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        self.staff = User.objects.create_user(username="staff", password="pass12345", is_staff=True)  # nosec B106
        self.client.force_authenticate(user=self.staff)
        self.category = Category.objects.create(name_english="Driving Jobs", name_malayalam="ഡ്രൈവിംഗ്")
        self.url = reverse('admin-categories-upload-qr', args=[self.category.pk])

    def test_upload_qr(self):
        resp = self.client.post(self.url, {'qr_code': make_image()}, format='multipart')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.category.refresh_from_db()
        self.assertTrue(self.category.qr_code.name.startswith(f"category-qr/{self.category.pk}/payment-qr"))
        self.assertTrue(os.path.exists(self.category.qr_code.path))

    def test_reupload_replaces_previous_file(self):
        self.client.post(self.url, {'qr_code': make_image()}, format='multipart')
        self.category.refresh_from_db()
        first_path = self.category.qr_code.path
        with self.captureOnCommitCallbacks(execute=True):
            self.client.post(self.url, {'qr_code': make_image('new.png')}, format='multipart')
        self.category.refresh_from_db()
        self.assertTrue(os.path.exists(self.category.qr_code.path))
        self.assertNotEqual(self.category.qr_code.path, first_path)
        self.assertFalse(os.path.exists(first_path))

    def test_non_image_is_rejected(self):
        upload = SimpleUploadedFile('qr.txt', b'not an image', content_type='text/plain')
        resp = self.client.post(self.url, {'qr_code': upload}, format='multipart')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.category.refresh_from_db()
        self.assertFalse(self.category.qr_code)
