import logging
from django.shortcuts import get_object_or_404
from rest_framework import status, generics
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from apps.management.mixins import AdminModelViewSet, ToggleActiveMixin
from core.storage import attach_file
from .models import Category, SubCategory, Program
from .selectors import get_public_categories, get_selectable_categories, get_category_programs
from .serializers import (
    CategorySerializer, PublicCategorySerializer, CategoryQRUploadSerializer,
    SubCategorySerializer, ProgramSerializer
)

logger = logging.getLogger(__name__)


class CategoryViewSet(ToggleActiveMixin, AdminModelViewSet):
    """
    Admin API for managing categories (CRUD, active toggle, payment QR upload).
    Categories that still have subcategories, programs or registrations cannot be deleted.
    """
    queryset = Category.objects.all().order_by('-created_at')
    serializer_class = CategorySerializer
    log_label = 'category'

    @swagger_auto_schema(
        operation_description="Upload the payment QR image of a category. Replaces any existing QR.",
        request_body=CategoryQRUploadSerializer,
        consumes=['multipart/form-data'],
        responses={200: CategorySerializer, 400: 'Bad Request', 404: 'Not Found'}
    )
    @action(detail=True, methods=['post'], url_path='qr', parser_classes=[MultiPartParser, FormParser])
    def upload_qr(self, request, pk=None):
        category = self.get_object()
        serializer = CategoryQRUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            attach_file(category, 'qr_code', serializer.validated_data['qr_code'])
        except Exception as e:
            logger.error(f"QR upload failed for category {category.pk}: {str(e)}")
            return Response({"error": "Failed to save QR image"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.log_action('upload', f"Uploaded payment QR for category {category} (ID: {category.pk})")
        return Response(CategorySerializer(category, context={'request': request}).data)


class SubCategoryViewSet(AdminModelViewSet):
    """
    Admin API for managing subcategories. Filter by parent with ``?category=<id>``.
    """
    serializer_class = SubCategorySerializer
    log_label = 'subcategory'

    def get_queryset(self):
        queryset = SubCategory.objects.select_related('category').order_by('name')
        category_id = self.request.query_params.get('category')
        if category_id:
            queryset = queryset.filter(category_id=category_id)
        return queryset


class ProgramViewSet(ToggleActiveMixin, AdminModelViewSet):
    """
    Admin API for managing programs (CRUD and active toggle).
    Filter with ``?category=<id>`` and ``?sub_category=<id>``.
    """
    serializer_class = ProgramSerializer
    log_label = 'program'

    def get_queryset(self):
        queryset = Program.objects.select_related('category', 'sub_category').order_by('category_id', '-priority', 'name')
        category_id = self.request.query_params.get('category')
        if category_id:
            queryset = queryset.filter(category_id=category_id)
        sub_category_id = self.request.query_params.get('sub_category')
        if sub_category_id:
            queryset = queryset.filter(sub_category_id=sub_category_id)
        return queryset


class PublicCategoryListView(generics.ListAPIView):
    """All categories for the public categories page; inactive ones are shown as coming soon."""
    serializer_class = PublicCategorySerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        return get_public_categories()

    @swagger_auto_schema(operation_description="List all categories ordered by English name.")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class SelectableCategoryListView(generics.ListAPIView):
    """Active categories a customer can pick a job from."""
    serializer_class = PublicCategorySerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        return get_selectable_categories()

    @swagger_auto_schema(operation_description="List active categories available for job selection.")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class CategoryProgramListView(generics.ListAPIView):
    serializer_class = ProgramSerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):
        category = get_object_or_404(Category, pk=self.kwargs['pk'])
        return get_category_programs(category.pk)

    @swagger_auto_schema(
        operation_description="List active programs of a category, featured programs first, then by priority.",
        manual_parameters=[
            openapi.Parameter('pk', openapi.IN_PATH, type=openapi.TYPE_INTEGER, description='Category ID')
        ],
        responses={200: ProgramSerializer(many=True), 404: 'Not Found'}
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)
