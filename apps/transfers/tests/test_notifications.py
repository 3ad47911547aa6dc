from unittest import mock
from django.test import TestCase, override_settings
from twilio.base.exceptions import TwilioRestException
from apps.catalog.models import Category, Program
from apps.registrations.models import Registration
from apps.transfers.notifications import format_mobile_number, send_sms, notify_transfer_decision
from apps.transfers.services import submit_transfer_request, reject_transfer_request

TWILIO_SETTINGS = {
    'TWILIO_ACCOUNT_SID': 'AC123',
    'TWILIO_AUTH_TOKEN': 'token',
    'TWILIO_PHONE_NUMBER': '+15005550006',
}


class FormatMobileNumberTests(TestCase):
    def test_local_number_gets_country_code(self):
        self.assertEqual(format_mobile_number("9876543210"), "+919876543210")

    def test_international_number_is_kept(self):
        self.assertEqual(format_mobile_number("+14155550100"), "+14155550100")

    def test_number_with_country_digits_gets_plus(self):
        self.assertEqual(format_mobile_number("919876543210"), "+919876543210")


class SendSmsTests(TestCase):
    @override_settings(TWILIO_ACCOUNT_SID='', TWILIO_AUTH_TOKEN='', TWILIO_PHONE_NUMBER='')
    def test_skipped_when_twilio_not_configured(self):
        with mock.patch('apps.transfers.notifications.TwilioClient') as client_cls:
            self.assertFalse(send_sms("9876543210", "hello"))
        client_cls.assert_not_called()

    @override_settings(**TWILIO_SETTINGS)
    def test_sends_through_twilio(self):
        with mock.patch('apps.transfers.notifications.TwilioClient') as client_cls:
            self.assertTrue(send_sms("9876543210", "hello"))
        client_cls.return_value.messages.create.assert_called_once_with(
            body="hello", from_='+15005550006', to='+919876543210'
        )

    @override_settings(**TWILIO_SETTINGS)
    def test_twilio_error_is_logged_not_raised(self):
        with mock.patch('apps.transfers.notifications.TwilioClient') as client_cls:
            client_cls.return_value.messages.create.side_effect = TwilioRestException(400, '/Messages', 'bad number')
            self.assertFalse(send_sms("9876543210", "hello"))

    @override_settings(**TWILIO_SETTINGS)
    def test_network_error_is_logged_not_raised(self):
        with mock.patch('apps.transfers.notifications.TwilioClient') as client_cls:
            client_cls.return_value.messages.create.side_effect = ConnectionError("dns failure")
            with self.assertLogs('apps.transfers.notifications', level='ERROR'):
                self.assertFalse(send_sms("9876543210", "hello"))


class NotifyTransferDecisionTests(TestCase):
    def test_rejection_message_names_both_programs(self):
        category = Category.objects.create(name_english="Driving Jobs", name_malayalam="ഡ്രൈവിംഗ്")
        driving = Program.objects.create(category=category, name="Driving")
        delivery = Program.objects.create(category=category, name="Delivery")
        registration = Registration.objects.create(
            full_name="Anu Thomas", mobile_number="9876543210", category=category, program=driving
        )
        transfer = reject_transfer_request(submit_transfer_request(registration, delivery))
        with mock.patch('apps.transfers.notifications.send_sms', return_value=True) as sms:
            notify_transfer_decision(transfer)
        number, message = sms.call_args[0]
        self.assertEqual(number, "9876543210")
        self.assertIn("Delivery", message)
        self.assertIn("Driving", message)
