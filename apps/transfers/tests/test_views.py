from unittest import mock
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APITransactionTestCase
from apps.catalog.models import Category, Program
from apps.management.models import ManagementLog
from apps.registrations.models import Registration
from apps.transfers.models import JobTransferRequest
from apps.transfers.services import submit_transfer_request

User = get_user_model()


class TransferApiTestBase(APITestCase):
    def setUp(self):
        self.category = Category.objects.create(name_english="Driving Jobs", name_malayalam="ഡ്രൈവിംഗ്")
        self.other_category = Category.objects.create(name_english="Tailoring", name_malayalam="തയ്യൽ")
        self.driving = Program.objects.create(category=self.category, name="Driving", priority=1)
        self.delivery = Program.objects.create(category=self.category, name="Delivery", priority=5)
        self.stitching = Program.objects.create(category=self.other_category, name="Stitching", priority=9)
        self.registration = Registration.objects.create(
            full_name="Anu Thomas",
            mobile_number="9876543210",
            category=self.category,
            program=self.driving,
        )
        self.staff = User.objects.create_user(username="staff", password="pass12345", is_staff=True)  # nosec B106
        self.customer_user = User.objects.create_user(username="someone", password="pass12345")  # nosec B106


class CustomerTransferApiTests(TransferApiTestBase):
    def test_submit_transfer_request(self):
        url = reverse('transfer_submit', args=[self.registration.pk])
        resp = self.client.post(url, {
            'to_program_id': self.delivery.pk,
            'reason': 'relocation',
            'mobile_number': '9876543210',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['status'], 'pending')
        self.assertEqual(resp.data['from_program']['id'], self.driving.pk)
        self.assertEqual(resp.data['to_program']['id'], self.delivery.pk)

    def test_submit_requires_matching_mobile_number(self):
        url = reverse('transfer_submit', args=[self.registration.pk])
        resp = self.client.post(url, {
            'to_program_id': self.delivery.pk,
            'mobile_number': '9000000000',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('mobile_number', resp.data)
        self.assertFalse(JobTransferRequest.objects.exists())

    def test_submit_accepts_number_as_typed_at_registration(self):
        resp = self.client.post(reverse('registration_create'), {
            'full_name': 'Biju',
            'mobile_number': '98765 43210',
            'category_id': self.category.pk,
            'program_id': self.driving.pk,
        }, format='json')
        url = reverse('transfer_submit', args=[resp.data['id']])
        resp = self.client.post(url, {
            'to_program_id': self.delivery.pk,
            'mobile_number': '98765 43210',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.assertEqual(resp.data['mobile_number'], '9876543210')

    def test_submit_without_target_is_rejected(self):
        url = reverse('transfer_submit', args=[self.registration.pk])
        resp = self.client.post(url, {'mobile_number': '9876543210'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error'], "Please select a job to transfer to.")

    def test_submit_same_program_is_rejected(self):
        url = reverse('transfer_submit', args=[self.registration.pk])
        resp = self.client.post(url, {
            'to_program_id': self.driving.pk,
            'mobile_number': '9876543210',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_pending_request_returns_conflict(self):
        submit_transfer_request(self.registration, self.delivery)
        other = Program.objects.create(category=self.category, name="Cab Service", priority=2)
        url = reverse('transfer_submit', args=[self.registration.pk])
        resp = self.client.post(url, {
            'to_program_id': other.pk,
            'mobile_number': '9876543210',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(JobTransferRequest.objects.count(), 1)

    def test_pending_request_endpoint(self):
        url = reverse('transfer_pending', args=[self.registration.pk])
        resp = self.client.get(url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIsNone(resp.data['pending_request'])

        transfer = submit_transfer_request(self.registration, self.delivery)
        resp = self.client.get(url)
        self.assertEqual(resp.data['pending_request']['id'], transfer.pk)

    def test_eligible_programs_endpoint(self):
        url = reverse('transfer_eligible_programs', args=[self.registration.pk])
        resp = self.client.get(url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([p['id'] for p in resp.data], [self.delivery.pk])

    def test_unknown_registration_returns_404(self):
        resp = self.client.get(reverse('transfer_pending', args=[9999]))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)


class AdminTransferApiTests(TransferApiTestBase):
    def setUp(self):
        super().setUp()
        self.transfer = submit_transfer_request(self.registration, self.delivery, "relocation")

    def test_admin_endpoints_require_authentication(self):
        resp = self.client.get(reverse('admin-transfer-requests-list'))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_admin_endpoints_require_staff(self):
        self.client.force_authenticate(user=self.customer_user)
        resp = self.client.post(reverse('admin-transfer-requests-approve', args=[self.transfer.pk]))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.registration.refresh_from_db()
        self.assertEqual(self.registration.program, self.driving)

    def test_list_filters_by_status(self):
        self.client.force_authenticate(user=self.staff)
        resp = self.client.get(reverse('admin-transfer-requests-list'), {'status': 'pending'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([r['id'] for r in resp.data], [self.transfer.pk])
        self.assertEqual(resp.data[0]['to_program']['name'], "Delivery")

        resp = self.client.get(reverse('admin-transfer-requests-list'), {'processed': 'true'})
        self.assertEqual(resp.data, [])

    def test_approve_moves_registration(self):
        self.client.force_authenticate(user=self.staff)
        resp = self.client.post(reverse('admin-transfer-requests-approve', args=[self.transfer.pk]))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['status'], 'approved')
        self.assertEqual(resp.data['processed_by'], 'staff')
        self.assertIsNotNone(resp.data['processed_at'])
        self.registration.refresh_from_db()
        self.assertEqual(self.registration.program, self.delivery)
        self.assertTrue(ManagementLog.objects.filter(admin=self.staff, action='approve_transfer').exists())

    def test_reject_keeps_registration(self):
        self.client.force_authenticate(user=self.staff)
        resp = self.client.post(reverse('admin-transfer-requests-reject', args=[self.transfer.pk]))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['status'], 'rejected')
        self.registration.refresh_from_db()
        self.assertEqual(self.registration.program, self.driving)

    def test_processed_request_returns_conflict(self):
        self.client.force_authenticate(user=self.staff)
        self.client.post(reverse('admin-transfer-requests-reject', args=[self.transfer.pk]))
        resp = self.client.post(reverse('admin-transfer-requests-approve', args=[self.transfer.pk]))
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.registration.refresh_from_db()
        self.assertEqual(self.registration.program, self.driving)


@override_settings(
    TWILIO_ACCOUNT_SID='AC123', TWILIO_AUTH_TOKEN='token', TWILIO_PHONE_NUMBER='+15005550006'
)
class TransferDecisionCommitTests(APITransactionTestCase):
    def setUp(self):
        category = Category.objects.create(name_english="Driving Jobs", name_malayalam="ഡ്രൈവിംഗ്")
        self.driving = Program.objects.create(category=category, name="Driving")
        self.delivery = Program.objects.create(category=category, name="Delivery")
        self.registration = Registration.objects.create(
            full_name="Anu Thomas", mobile_number="9876543210", category=category, program=self.driving
        )
        self.transfer = submit_transfer_request(self.registration, self.delivery)
        self.staff = User.objects.create_user(username="staff", password="pass12345", is_staff=True)  # nosec B106
        self.client.force_authenticate(user=self.staff)

    def test_sms_outage_does_not_fail_committed_approval(self):
        with mock.patch('apps.transfers.notifications.TwilioClient') as client_cls:
            client_cls.return_value.messages.create.side_effect = ConnectionError("dns failure")
            resp = self.client.post(reverse('admin-transfer-requests-approve', args=[self.transfer.pk]))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['status'], 'approved')
        client_cls.return_value.messages.create.assert_called_once()
        self.registration.refresh_from_db()
        self.assertEqual(self.registration.program, self.delivery)
        self.assertEqual(ManagementLog.objects.filter(action='approve_transfer').count(), 1)

    def test_failed_audit_write_rolls_back_decision(self):
        with mock.patch('apps.transfers.views.ManagementLog.objects.create', side_effect=DatabaseError("write failed")):
            with mock.patch('apps.transfers.notifications.TwilioClient') as client_cls:
                resp = self.client.post(reverse('admin-transfer-requests-reject', args=[self.transfer.pk]))
        self.assertEqual(resp.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        client_cls.assert_not_called()
        self.transfer.refresh_from_db()
        self.assertEqual(self.transfer.status, 'pending')
