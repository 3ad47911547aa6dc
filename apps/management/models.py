from django.db import models
from django.conf import settings
from core.constants import MANAGEMENT_ACTIONS


class ManagementLog(models.Model):
    """Log admin actions (catalog edits, transfer decisions, uploads)."""
    admin = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='management_logs')
    action = models.CharField(max_length=100, choices=MANAGEMENT_ACTIONS)
    details = models.TextField()
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp']

    def __str__(self):
        return f"{self.admin.username} - {self.action} at {self.timestamp}"
