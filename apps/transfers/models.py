from django.db import models
from django.db.models import Q
from apps.catalog.models import Program
from apps.registrations.models import Registration
from core.constants import TRANSFER_STATUS_CHOICES, TRANSFER_STATUS_PENDING


class JobTransferRequest(models.Model):
    registration = models.ForeignKey(Registration, on_delete=models.PROTECT, related_name='transfer_requests')
    from_program = models.ForeignKey(Program, on_delete=models.PROTECT, related_name='transfers_out')
    to_program = models.ForeignKey(Program, on_delete=models.PROTECT, related_name='transfers_in')
    customer_id = models.CharField(max_length=20)
    full_name = models.CharField(max_length=200)
    mobile_number = models.CharField(max_length=15)
    reason = models.TextField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=TRANSFER_STATUS_CHOICES, default=TRANSFER_STATUS_PENDING)
    requested_at = models.DateTimeField(auto_now_add=True)
    processed_at = models.DateTimeField(null=True, blank=True)
    processed_by = models.CharField(max_length=150, null=True, blank=True)

    class Meta:
        db_table = 'job_transfer_requests'
        ordering = ['-requested_at']
        constraints = [
            models.UniqueConstraint(
                fields=['registration'],
                condition=Q(status=TRANSFER_STATUS_PENDING),
                name='unique_pending_transfer_per_registration',
            ),
        ]

    def __str__(self):
        return f"Transfer #{self.id} for {self.customer_id}: {self.from_program_id} -> {self.to_program_id} ({self.status})"

    @property
    def is_pending(self):
        return self.status == TRANSFER_STATUS_PENDING
