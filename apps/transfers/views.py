import logging
from django.db import transaction
from django.shortcuts import get_object_or_404
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from apps.catalog.serializers import ProgramSerializer
from apps.management.models import ManagementLog
from apps.management.permissions import IsAdminUser
from apps.registrations.models import Registration
from core.constants import TRANSFER_STATUS_CHOICES, TRANSFER_STATUS_PENDING
from .models import JobTransferRequest
from .serializers import JobTransferRequestSerializer, TransferSubmitSerializer
from .services import (
    TransferError, get_pending_request, eligible_programs, submit_transfer_request,
    approve_transfer_request, reject_transfer_request
)

logger = logging.getLogger(__name__)


def transfer_error_response(error):
    code = status.HTTP_409_CONFLICT if error.code == 'conflict' else status.HTTP_400_BAD_REQUEST
    return Response({"error": error.message}, status=code)


class PendingTransferView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="Return the pending transfer request of a registration, or null.",
        responses={200: JobTransferRequestSerializer, 404: 'Not Found'}
    )
    def get(self, request, registration_id):
        registration = get_object_or_404(Registration, pk=registration_id)
        pending = get_pending_request(registration)
        return Response({
            'pending_request': JobTransferRequestSerializer(pending).data if pending else None
        })


class EligibleProgramsView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="List programs a registration can transfer to, highest priority first.",
        responses={200: ProgramSerializer(many=True), 404: 'Not Found'}
    )
    def get(self, request, registration_id):
        registration = get_object_or_404(Registration.objects.select_related('category'), pk=registration_id)
        serializer = ProgramSerializer(eligible_programs(registration), many=True)
        return Response(serializer.data)


class TransferSubmitView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="Request a job transfer for a registration. Only one pending request is allowed.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['to_program_id', 'mobile_number'],
            properties={
                'to_program_id': openapi.Schema(type=openapi.TYPE_INTEGER),
                'reason': openapi.Schema(type=openapi.TYPE_STRING, nullable=True),
                'mobile_number': openapi.Schema(
                    type=openapi.TYPE_STRING,
                    description='Mobile number of the registration, used to confirm the requester'
                ),
            }
        ),
        responses={
            201: JobTransferRequestSerializer,
            400: 'Bad Request',
            404: 'Not Found',
            409: 'A pending request already exists'
        }
    )
    def post(self, request, registration_id):
        registration = get_object_or_404(Registration, pk=registration_id)
        serializer = TransferSubmitSerializer(data=request.data, context={'registration': registration})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        try:
            transfer = submit_transfer_request(
                registration,
                serializer.validated_data.get('to_program_id'),
                serializer.validated_data.get('reason')
            )
        except TransferError as e:
            return transfer_error_response(e)
        except Exception as e:
            logger.error(f"Error submitting transfer request for registration {registration_id}: {str(e)}")
            return Response({"error": "Error submitting transfer request"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(JobTransferRequestSerializer(transfer).data, status=status.HTTP_201_CREATED)


class TransferRequestAdminViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Admin API for job transfer requests, newest first.
    Filter with ``?status=pending|approved|rejected`` or ``?processed=true|false``.
    """
    serializer_class = JobTransferRequestSerializer
    permission_classes = [IsAuthenticated, IsAdminUser]

    def get_queryset(self):
        queryset = JobTransferRequest.objects.select_related('registration', 'from_program', 'to_program')
        params = self.request.query_params
        status_filter = params.get('status')
        if status_filter in dict(TRANSFER_STATUS_CHOICES):
            queryset = queryset.filter(status=status_filter)
        processed = params.get('processed')
        if processed is not None:
            if processed.lower() in ('1', 'true', 'yes'):
                queryset = queryset.exclude(status=TRANSFER_STATUS_PENDING)
            else:
                queryset = queryset.filter(status=TRANSFER_STATUS_PENDING)
        return queryset.order_by('-requested_at')

    def _decide(self, request, decide, action_name, failure_message):
        transfer = self.get_object()
        admin_name = request.user.get_username()
        try:
            # The decision and its audit row commit together.
            with transaction.atomic():
                transfer = decide(transfer, processed_by=admin_name)
                ManagementLog.objects.create(
                    admin=request.user,
                    action=action_name,
                    details=(
                        f"{action_name.replace('_', ' ').capitalize()} #{transfer.pk} for {transfer.customer_id}: "
                        f"{transfer.from_program.name} -> {transfer.to_program.name}"
                    )
                )
        except TransferError as e:
            return transfer_error_response(e)
        except Exception as e:
            logger.error(f"Error processing transfer request {transfer.pk}: {str(e)}")
            return Response({"error": failure_message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(JobTransferRequestSerializer(transfer).data)

    @swagger_auto_schema(
        operation_description="Approve a pending transfer: the registration moves to the requested program.",
        request_body=openapi.Schema(type=openapi.TYPE_OBJECT, properties={}),
        responses={200: JobTransferRequestSerializer, 404: 'Not Found', 409: 'Already processed'}
    )
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        return self._decide(request, approve_transfer_request, 'approve_transfer', "Error approving transfer request")

    @swagger_auto_schema(
        operation_description="Reject a pending transfer. The registration is left unchanged.",
        request_body=openapi.Schema(type=openapi.TYPE_OBJECT, properties={}),
        responses={200: JobTransferRequestSerializer, 404: 'Not Found', 409: 'Already processed'}
    )
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        return self._decide(request, reject_transfer_request, 'reject_transfer', "Error rejecting transfer request")
