from unittest import mock
from django.db import DatabaseError, IntegrityError, transaction
from django.test import TestCase, skipUnlessDBFeature
from apps.catalog.models import Category, Program
from apps.registrations.models import Registration
from apps.transfers.models import JobTransferRequest
from apps.transfers.services import (
    TransferError, get_pending_request, eligible_programs, submit_transfer_request,
    approve_transfer_request, reject_transfer_request
)


class TransferWorkflowTestBase(TestCase):
    def setUp(self):
        self.driving_category = Category.objects.create(name_english="Driving Jobs", name_malayalam="ഡ്രൈവിംഗ്")
        self.tailoring_category = Category.objects.create(name_english="Tailoring", name_malayalam="തയ്യൽ")
        self.job_card_category = Category.objects.create(name_english="Job Card Scheme", name_malayalam="ജോബ് കാർഡ്")

        self.driving = Program.objects.create(category=self.driving_category, name="Driving", priority=1)
        self.delivery = Program.objects.create(category=self.driving_category, name="Delivery", priority=5)
        self.cab = Program.objects.create(category=self.driving_category, name="Cab Service", priority=10)
        self.retired = Program.objects.create(category=self.driving_category, name="Retired", priority=20, is_active=False)
        self.stitching = Program.objects.create(category=self.tailoring_category, name="Stitching", priority=3)
        self.card_driving = Program.objects.create(category=self.job_card_category, name="Driving", priority=2)

        self.registration = Registration.objects.create(
            full_name="Anu Thomas",
            mobile_number="9876543210",
            category=self.driving_category,
            program=self.driving,
        )


class EligibleProgramsTests(TransferWorkflowTestBase):
    def test_same_category_only_active_and_not_current(self):
        programs = list(eligible_programs(self.registration))
        self.assertEqual(programs, [self.cab, self.delivery])

    def test_job_card_category_allows_any_category(self):
        registration = Registration.objects.create(
            full_name="Biju", mobile_number="9123456780",
            category=self.job_card_category, program=self.card_driving
        )
        programs = list(eligible_programs(registration))
        self.assertNotIn(self.card_driving, programs)
        self.assertNotIn(self.retired, programs)
        self.assertIn(self.stitching, programs)
        self.assertIn(self.delivery, programs)
        priorities = [p.priority for p in programs]
        self.assertEqual(priorities, sorted(priorities, reverse=True))

    def test_job_card_match_is_case_insensitive(self):
        self.job_card_category.name_english = "Special JOB CARD Offer"
        self.job_card_category.save()
        registration = Registration.objects.create(
            full_name="Biju", mobile_number="9123456780",
            category=self.job_card_category, program=self.card_driving
        )
        self.assertIn(self.stitching, eligible_programs(registration))


class SubmitTransferTests(TransferWorkflowTestBase):
    def test_submit_creates_pending_request(self):
        transfer = submit_transfer_request(self.registration, self.delivery, "relocation")
        self.assertEqual(transfer.status, 'pending')
        self.assertEqual(transfer.from_program, self.driving)
        self.assertEqual(transfer.to_program, self.delivery)
        self.assertEqual(transfer.reason, "relocation")
        self.assertEqual(transfer.customer_id, self.registration.customer_id)
        self.assertEqual(transfer.mobile_number, "9876543210")
        self.assertEqual(get_pending_request(self.registration), transfer)

    def test_blank_reason_is_stored_as_null(self):
        transfer = submit_transfer_request(self.registration, self.delivery, "   ")
        self.assertIsNone(transfer.reason)

    def test_second_pending_request_is_rejected(self):
        submit_transfer_request(self.registration, self.delivery)
        with self.assertRaises(TransferError) as ctx:
            submit_transfer_request(self.registration, self.cab)
        self.assertEqual(ctx.exception.code, 'conflict')
        self.assertEqual(JobTransferRequest.objects.filter(registration=self.registration).count(), 1)

    def test_target_equal_to_current_program_is_rejected(self):
        with self.assertRaises(TransferError):
            submit_transfer_request(self.registration, self.driving)
        self.assertFalse(JobTransferRequest.objects.exists())

    def test_missing_target_is_rejected(self):
        with self.assertRaises(TransferError) as ctx:
            submit_transfer_request(self.registration, None)
        self.assertEqual(ctx.exception.message, "Please select a job to transfer to.")

    def test_registration_without_program_is_rejected(self):
        registration = Registration.objects.create(
            full_name="No Job", mobile_number="9000000000", category=self.driving_category
        )
        with self.assertRaises(TransferError) as ctx:
            submit_transfer_request(registration, self.delivery)
        self.assertEqual(ctx.exception.message, "No current job selected.")

    def test_program_of_other_category_is_rejected(self):
        with self.assertRaises(TransferError):
            submit_transfer_request(self.registration, self.stitching)

    def test_inactive_program_is_rejected(self):
        with self.assertRaises(TransferError):
            submit_transfer_request(self.registration, self.retired)

    @skipUnlessDBFeature("supports_partial_indexes")
    def test_database_allows_only_one_pending_request(self):
        submit_transfer_request(self.registration, self.delivery)
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                JobTransferRequest.objects.create(
                    registration=self.registration,
                    from_program=self.driving,
                    to_program=self.cab,
                    customer_id=self.registration.customer_id,
                    full_name=self.registration.full_name,
                    mobile_number=self.registration.mobile_number,
                )

    def test_new_request_allowed_after_decision(self):
        first = submit_transfer_request(self.registration, self.delivery)
        reject_transfer_request(first)
        second = submit_transfer_request(self.registration, self.cab)
        self.assertEqual(second.status, 'pending')


class DecideTransferTests(TransferWorkflowTestBase):
    def setUp(self):
        super().setUp()
        self.transfer = submit_transfer_request(self.registration, self.delivery, "relocation")

    def test_approve_moves_registration_and_marks_request(self):
        transfer = approve_transfer_request(self.transfer, processed_by="staff")
        self.registration.refresh_from_db()
        self.assertEqual(self.registration.program, self.delivery)
        self.assertEqual(transfer.status, 'approved')
        self.assertIsNotNone(transfer.processed_at)
        self.assertEqual(transfer.processed_by, "staff")
        self.assertIsNone(get_pending_request(self.registration))

    def test_approve_without_user_uses_default_attribution(self):
        transfer = approve_transfer_request(self.transfer)
        self.assertEqual(transfer.processed_by, "admin")

    def test_reject_leaves_registration_unchanged(self):
        transfer = reject_transfer_request(self.transfer, processed_by="staff")
        self.registration.refresh_from_db()
        self.assertEqual(self.registration.program, self.driving)
        self.assertEqual(transfer.status, 'rejected')
        self.assertIsNotNone(transfer.processed_at)

    def test_processed_request_cannot_be_decided_again(self):
        reject_transfer_request(self.transfer)
        with self.assertRaises(TransferError) as ctx:
            approve_transfer_request(self.transfer)
        self.assertEqual(ctx.exception.code, 'conflict')
        self.registration.refresh_from_db()
        self.assertEqual(self.registration.program, self.driving)
        self.transfer.refresh_from_db()
        self.assertEqual(self.transfer.status, 'rejected')

    def test_failed_status_write_rolls_back_registration_move(self):
        with mock.patch.object(JobTransferRequest, 'save', side_effect=DatabaseError("write failed")):
            with self.assertRaises(DatabaseError):
                approve_transfer_request(self.transfer)
        self.registration.refresh_from_db()
        self.transfer.refresh_from_db()
        self.assertEqual(self.registration.program, self.driving)
        self.assertEqual(self.transfer.status, 'pending')

    def test_customer_is_notified_after_commit(self):
        with mock.patch('apps.transfers.services.notify_transfer_decision') as notify:
            with self.captureOnCommitCallbacks(execute=True):
                approve_transfer_request(self.transfer)
        notify.assert_called_once()
        self.assertEqual(notify.call_args[0][0].status, 'approved')
