from rest_framework import generics
from rest_framework.parsers import MultiPartParser, FormParser, JSONParser
from rest_framework.permissions import AllowAny
from drf_yasg.utils import swagger_auto_schema
from apps.management.mixins import AdminModelViewSet, ToggleActiveMixin
from core.storage import remove_file
from .models import Announcement
from .serializers import AnnouncementSerializer


class AnnouncementViewSet(ToggleActiveMixin, AdminModelViewSet):
    """
    Admin API for announcements (CRUD, active toggle, optional image).
    Send ``upload_image`` as multipart to attach or replace the image.
    """
    queryset = Announcement.objects.all().order_by('-created_at')
    serializer_class = AnnouncementSerializer
    parser_classes = [MultiPartParser, FormParser, JSONParser]
    log_label = 'announcement'

    def perform_destroy(self, instance):
        remove_file(instance, 'image')
        super().perform_destroy(instance)


class ActiveAnnouncementListView(generics.ListAPIView):
    serializer_class = AnnouncementSerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        return Announcement.objects.filter(is_active=True).order_by('-created_at')

    @swagger_auto_schema(operation_description="List active announcements, newest first.")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)
