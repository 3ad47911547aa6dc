import logging
from django.db.models import ProtectedError
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from .models import ManagementLog
from .permissions import IsAdminUser

logger = logging.getLogger(__name__)


class AdminModelViewSet(viewsets.ModelViewSet):
    """
    Admin CRUD viewset that records every mutation in the ManagementLog.

    Subclasses set ``log_label`` (e.g. ``'category'``). Deleting a row that
    still has dependent rows answers 409 instead of orphaning them.
    """
    permission_classes = [IsAuthenticated, IsAdminUser]
    log_label = 'record'

    def log_action(self, action_name, details):
        ManagementLog.objects.create(
            admin=self.request.user,
            action=action_name,
            details=details
        )

    def perform_create(self, serializer):
        instance = serializer.save()
        self.log_action('create', f"Created {self.log_label} {instance} (ID: {instance.pk})")
        logger.info(f"{self.request.user.username} created {self.log_label} {instance.pk}")

    def perform_update(self, serializer):
        instance = serializer.save()
        self.log_action('update', f"Updated {self.log_label} {instance} (ID: {instance.pk}): {serializer.validated_data}")

    def perform_destroy(self, instance):
        label = str(instance)
        pk = instance.pk
        instance.delete()
        self.log_action('delete', f"Deleted {self.log_label} {label} (ID: {pk})")
        logger.info(f"{self.request.user.username} deleted {self.log_label} {pk}")

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        try:
            self.perform_destroy(instance)
        except ProtectedError as e:
            dependents = sorted({obj._meta.verbose_name_plural for obj in e.protected_objects})
            logger.warning(f"Refused to delete {self.log_label} {instance.pk}: still referenced by {', '.join(dependents)}")
            return Response(
                {"error": f"Cannot delete this {self.log_label} while it still has {', '.join(dependents)}."},
                status=status.HTTP_409_CONFLICT
            )
        return Response(status=status.HTTP_204_NO_CONTENT)


class ToggleActiveMixin:
    """Adds ``POST <pk>/toggle-active/`` flipping the row's ``is_active`` flag."""

    @action(detail=True, methods=['post'], url_path='toggle-active')
    def toggle_active(self, request, pk=None):
        instance = self.get_object()
        instance.is_active = not instance.is_active
        instance.save(update_fields=['is_active'])
        self.log_action(
            'toggle_active',
            f"Set {self.log_label} {instance} (ID: {instance.pk}) active={instance.is_active}"
        )
        return Response({'id': instance.pk, 'is_active': instance.is_active})
