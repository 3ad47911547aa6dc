from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from apps.catalog.models import Category, Program
from apps.transfers.models import JobTransferRequest
from apps.transfers.services import submit_transfer_request, approve_transfer_request
from .models import Registration

User = get_user_model()


class RegistrationModelTests(TestCase):
    def test_customer_id_is_generated_once(self):
        category = Category.objects.create(name_english="Tailoring", name_malayalam="തയ്യൽ")
        registration = Registration.objects.create(full_name="Anu", mobile_number="9876543210", category=category)
        self.assertRegex(registration.customer_id, r'^CUS[0-9A-F]{8}$')
        customer_id = registration.customer_id
        registration.full_name = "Anu Thomas"
        registration.save()
        registration.refresh_from_db()
        self.assertEqual(registration.customer_id, customer_id)


class PublicRegistrationApiTests(APITestCase):
    def setUp(self):
        self.category = Category.objects.create(name_english="Tailoring", name_malayalam="തയ്യൽ")
        self.program = Program.objects.create(category=self.category, name="Stitching")
        self.other_category = Category.objects.create(name_english="Driving Jobs", name_malayalam="ഡ്രൈവിംഗ്")
        self.other_program = Program.objects.create(category=self.other_category, name="Driving")
        self.url = reverse('registration_create')

    def test_register(self):
        resp = self.client.post(self.url, {
            'full_name': 'Anu Thomas',
            'mobile_number': '98765 43210',
            'category_id': self.category.pk,
            'program_id': self.program.pk,
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertTrue(resp.data['customer_id'].startswith('CUS'))
        self.assertEqual(resp.data['mobile_number'], '9876543210')
        self.assertEqual(resp.data['program']['id'], self.program.pk)

    def test_program_must_belong_to_category(self):
        resp = self.client.post(self.url, {
            'full_name': 'Anu Thomas',
            'mobile_number': '9876543210',
            'category_id': self.category.pk,
            'program_id': self.other_program.pk,
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('program_id', resp.data)
        self.assertFalse(Registration.objects.exists())

    def test_inactive_category_is_closed(self):
        self.category.is_active = False
        self.category.save()
        resp = self.client.post(self.url, {
            'full_name': 'Anu Thomas',
            'mobile_number': '9876543210',
            'category_id': self.category.pk,
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category_id', resp.data)

    def test_invalid_mobile_number(self):
        resp = self.client.post(self.url, {
            'full_name': 'Anu Thomas',
            'mobile_number': '12ab',
            'category_id': self.category.pk,
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('mobile_number', resp.data)


class RegistrationLookupApiTests(APITestCase):
    def setUp(self):
        category = Category.objects.create(name_english="Tailoring", name_malayalam="തയ്യൽ")
        self.registration = Registration.objects.create(
            full_name="Anu Thomas", mobile_number="9876543210", category=category
        )
        Registration.objects.create(full_name="Biju", mobile_number="9123456780", category=category)
        self.url = reverse('registration_lookup')

    def test_lookup_by_mobile_number(self):
        resp = self.client.get(self.url, {'mobile_number': '9876543210'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([r['id'] for r in resp.data], [self.registration.pk])

    def test_lookup_by_customer_id_ignores_case(self):
        resp = self.client.get(self.url, {'customer_id': self.registration.customer_id.lower()})
        self.assertEqual([r['id'] for r in resp.data], [self.registration.pk])

    def test_lookup_requires_a_key(self):
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)


class AdminRegistrationApiTests(APITestCase):
    def setUp(self):
        self.category = Category.objects.create(name_english="Tailoring", name_malayalam="തയ്യൽ")
        self.program = Program.objects.create(category=self.category, name="Stitching")
        self.registration = Registration.objects.create(
            full_name="Anu Thomas", mobile_number="9876543210", category=self.category, program=self.program
        )
        Registration.objects.create(full_name="Biju", mobile_number="9123456780", category=self.category)
        self.staff = User.objects.create_user(username="staff", password="pass12345", is_staff=True)  # nosec B106

    def test_requires_staff(self):
        user = User.objects.create_user(username="customer", password="pass12345")  # nosec B106
        self.client.force_authenticate(user=user)
        resp = self.client.get(reverse('admin-registrations-list'))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_search_and_filter(self):
        self.client.force_authenticate(user=self.staff)
        resp = self.client.get(reverse('admin-registrations-list'), {'search': 'anu'})
        self.assertEqual([r['id'] for r in resp.data], [self.registration.pk])
        resp = self.client.get(reverse('admin-registrations-list'), {'program': self.program.pk})
        self.assertEqual([r['id'] for r in resp.data], [self.registration.pk])

    def test_admin_update_keeps_customer_id(self):
        self.client.force_authenticate(user=self.staff)
        resp = self.client.patch(
            reverse('admin-registrations-detail', args=[self.registration.pk]),
            {'full_name': 'Anu T', 'customer_id': 'CUSFAKE'}, format='json'
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.registration.refresh_from_db()
        self.assertEqual(self.registration.full_name, 'Anu T')
        self.assertNotEqual(self.registration.customer_id, 'CUSFAKE')

    def test_delete_with_transfer_history_is_refused(self):
        delivery = Program.objects.create(category=self.category, name="Embroidery")
        approve_transfer_request(submit_transfer_request(self.registration, delivery))
        self.client.force_authenticate(user=self.staff)
        resp = self.client.delete(reverse('admin-registrations-detail', args=[self.registration.pk]))
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Registration.objects.filter(pk=self.registration.pk).exists())
        self.assertEqual(JobTransferRequest.objects.filter(registration=self.registration).count(), 1)

    def test_delete_without_transfers(self):
        other = Registration.objects.get(full_name="Biju")
        self.client.force_authenticate(user=self.staff)
        resp = self.client.delete(reverse('admin-registrations-detail', args=[other.pk]))
        self.assertEqual(resp.status_code, status.HTTP_204_NO_CONTENT)
