from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated
from .models import ManagementLog
from .permissions import IsAdminUser
from .serializers import ManagementLogSerializer


class ManagementLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Admin API for browsing the audit trail of admin actions.
    Filter with ``?action=approve_transfer``.
    """
    serializer_class = ManagementLogSerializer
    permission_classes = [IsAuthenticated, IsAdminUser]

    def get_queryset(self):
        queryset = ManagementLog.objects.select_related('admin')
        action = self.request.query_params.get('action')
        if action:
            queryset = queryset.filter(action=action)
        return queryset
