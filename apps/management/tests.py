from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from .models import ManagementLog

User = get_user_model()


class ManagementLogApiTests(APITestCase):
    def setUp(self):
        self.staff = User.objects.create_user(username="staff", password="pass12345", is_staff=True)  # nosec B106
        ManagementLog.objects.create(admin=self.staff, action='create', details="Created category Tailoring (ID: 1)")
        ManagementLog.objects.create(admin=self.staff, action='approve_transfer', details="Approved transfer request 3")

    def test_filter_by_action(self):
        self.client.force_authenticate(user=self.staff)
        resp = self.client.get(reverse('management-logs-list'), {'action': 'approve_transfer'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 1)
        self.assertEqual(resp.data[0]['admin'], 'staff')

    def test_logs_are_read_only(self):
        self.client.force_authenticate(user=self.staff)
        resp = self.client.post(reverse('management-logs-list'), {'action': 'create'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)

    def test_token_login(self):
        resp = self.client.post(reverse('auth_login'), {'username': 'staff', 'password': 'pass12345'})
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIn('token', resp.data)
