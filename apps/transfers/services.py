"""
Job transfer workflow.

A customer asks to move their registration to another program; an admin
approves (the registration is moved) or rejects (nothing changes). A request
is decided exactly once. Every state change runs inside a transaction with
the affected rows locked, so the registration and the request never disagree.
"""
import logging
from django.db import IntegrityError, transaction
from django.utils import timezone
from apps.catalog.models import Program
from apps.registrations.models import Registration
from core.constants import (
    TRANSFER_STATUS_PENDING, TRANSFER_STATUS_APPROVED,
    TRANSFER_STATUS_REJECTED, DEFAULT_PROCESSED_BY
)
from .models import JobTransferRequest
from .notifications import notify_transfer_decision

logger = logging.getLogger(__name__)


class TransferError(Exception):
    """A transfer operation was refused. ``code`` is ``'invalid'`` or ``'conflict'``."""

    def __init__(self, message, code='invalid'):
        super().__init__(message)
        self.message = message
        self.code = code


def get_pending_request(registration):
    """Return the pending transfer request of ``registration``, or None."""
    return (
        JobTransferRequest.objects
        .filter(registration=registration, status=TRANSFER_STATUS_PENDING)
        .select_related('from_program', 'to_program')
        .first()
    )


def eligible_programs(registration):
    """
    Programs ``registration`` may transfer to, highest priority first.

    Active programs other than the current one. Job card registrations may
    move to any category; everyone else stays within their own category.
    """
    programs = Program.objects.filter(is_active=True)
    if not registration.category.is_job_card:
        programs = programs.filter(category_id=registration.category_id)
    if registration.program_id:
        programs = programs.exclude(pk=registration.program_id)
    return programs.select_related('category').order_by('-priority', 'name')


@transaction.atomic
def submit_transfer_request(registration, to_program, reason=None):
    if to_program is None:
        raise TransferError("Please select a job to transfer to.")

    # Lock the registration so concurrent submissions are serialized.
    registration = (
        Registration.objects.select_for_update()
        .select_related('category')
        .get(pk=registration.pk)
    )
    if not registration.program_id:
        raise TransferError("No current job selected.")
    if to_program.pk == registration.program_id:
        raise TransferError("The selected job is already your current job.")
    if not eligible_programs(registration).filter(pk=to_program.pk).exists():
        raise TransferError("The selected job is not available for transfer.")
    if get_pending_request(registration) is not None:
        raise TransferError(
            "You have already requested a job transfer. Your request is being reviewed.",
            code='conflict'
        )

    try:
        with transaction.atomic():
            transfer = JobTransferRequest.objects.create(
                registration=registration,
                from_program_id=registration.program_id,
                to_program=to_program,
                customer_id=registration.customer_id,
                full_name=registration.full_name,
                mobile_number=registration.mobile_number,
                reason=(reason or '').strip() or None,
                status=TRANSFER_STATUS_PENDING,
            )
    except IntegrityError:
        logger.warning(f"Duplicate pending transfer request rejected for registration {registration.pk}")
        raise TransferError(
            "You have already requested a job transfer. Your request is being reviewed.",
            code='conflict'
        )

    logger.info(
        f"Transfer request {transfer.pk} submitted for registration {registration.pk}: "
        f"{transfer.from_program_id} -> {transfer.to_program_id}"
    )
    return transfer


def _lock_pending(transfer_request):
    transfer = (
        JobTransferRequest.objects.select_for_update()
        .select_related('from_program', 'to_program')
        .get(pk=transfer_request.pk)
    )
    if not transfer.is_pending:
        raise TransferError(f"This request has already been {transfer.status}.", code='conflict')
    return transfer


def _mark_processed(transfer, new_status, processed_by):
    transfer.status = new_status
    transfer.processed_at = timezone.now()
    transfer.processed_by = processed_by or DEFAULT_PROCESSED_BY
    transfer.save(update_fields=['status', 'processed_at', 'processed_by'])


@transaction.atomic
def approve_transfer_request(transfer_request, processed_by=None):
    """
    Move the registration to the requested program and mark the request approved.

    Both writes commit together or not at all.
    """
    transfer = _lock_pending(transfer_request)
    registration = Registration.objects.select_for_update().get(pk=transfer.registration_id)
    registration.program_id = transfer.to_program_id
    registration.save(update_fields=['program', 'updated_at'])
    _mark_processed(transfer, TRANSFER_STATUS_APPROVED, processed_by)

    logger.info(
        f"Transfer request {transfer.pk} approved by {transfer.processed_by}: "
        f"registration {registration.pk} moved to program {transfer.to_program_id}"
    )
    transaction.on_commit(lambda: notify_transfer_decision(transfer), robust=True)
    return transfer


@transaction.atomic
def reject_transfer_request(transfer_request, processed_by=None):
    """Mark the request rejected; the registration keeps its program."""
    transfer = _lock_pending(transfer_request)
    _mark_processed(transfer, TRANSFER_STATUS_REJECTED, processed_by)

    logger.info(f"Transfer request {transfer.pk} rejected by {transfer.processed_by}")
    transaction.on_commit(lambda: notify_transfer_decision(transfer), robust=True)
    return transfer
