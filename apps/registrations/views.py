import logging
from django.db.models import Q
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from apps.management.mixins import AdminModelViewSet
from .models import Registration
from .serializers import RegistrationSerializer, PublicRegistrationSerializer, RegistrationLookupSerializer

logger = logging.getLogger(__name__)


class RegistrationCreateView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="Register a customer for a category and (optionally) a program.",
        request_body=PublicRegistrationSerializer,
        responses={201: RegistrationSerializer, 400: 'Bad Request'}
    )
    def post(self, request):
        serializer = PublicRegistrationSerializer(data=request.data)
        if serializer.is_valid():
            registration = serializer.save()
            logger.info(f"Created registration {registration.customer_id} for category {registration.category_id}")
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class RegistrationLookupView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="Find a customer's registrations by mobile number or customer ID.",
        manual_parameters=[
            openapi.Parameter('mobile_number', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('customer_id', openapi.IN_QUERY, type=openapi.TYPE_STRING),
        ],
        responses={200: RegistrationSerializer(many=True), 400: 'Bad Request'}
    )
    def get(self, request):
        lookup = RegistrationLookupSerializer(data=request.query_params)
        if not lookup.is_valid():
            return Response(lookup.errors, status=status.HTTP_400_BAD_REQUEST)
        criteria = Q()
        if lookup.validated_data.get('mobile_number'):
            criteria |= Q(mobile_number=lookup.validated_data['mobile_number'])
        if lookup.validated_data.get('customer_id'):
            criteria |= Q(customer_id__iexact=lookup.validated_data['customer_id'].strip())
        registrations = Registration.objects.filter(criteria).select_related('category', 'program')
        serializer = RegistrationSerializer(registrations, many=True)
        return Response(serializer.data)


class RegistrationViewSet(AdminModelViewSet):
    """
    Admin API for registrations. Filter with ``?category=<id>``, ``?program=<id>``
    and ``?search=<name, mobile or customer id>``.
    """
    serializer_class = RegistrationSerializer
    log_label = 'registration'

    def get_queryset(self):
        queryset = Registration.objects.select_related('category', 'program')
        params = self.request.query_params
        if params.get('category'):
            queryset = queryset.filter(category_id=params['category'])
        if params.get('program'):
            queryset = queryset.filter(program_id=params['program'])
        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(full_name__icontains=search) |
                Q(mobile_number__icontains=search) |
                Q(customer_id__icontains=search)
            )
        return queryset
