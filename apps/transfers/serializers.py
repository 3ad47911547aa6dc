from rest_framework import serializers
from apps.catalog.models import Program
from apps.catalog.serializers import ProgramSummarySerializer
from apps.registrations.serializers import normalize_mobile_number
from .models import JobTransferRequest


class JobTransferRequestSerializer(serializers.ModelSerializer):
    registration_id = serializers.ReadOnlyField(source='registration.id')
    from_program = ProgramSummarySerializer(read_only=True)
    to_program = ProgramSummarySerializer(read_only=True)

    class Meta:
        model = JobTransferRequest
        fields = [
            'id', 'registration_id', 'from_program', 'to_program', 'customer_id',
            'full_name', 'mobile_number', 'reason', 'status', 'requested_at',
            'processed_at', 'processed_by'
        ]
        read_only_fields = fields


class TransferSubmitSerializer(serializers.Serializer):
    to_program_id = serializers.PrimaryKeyRelatedField(
        queryset=Program.objects.all(), required=False, allow_null=True,
        error_messages={'does_not_exist': 'Selected job does not exist.'}
    )
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=2000)
    mobile_number = serializers.CharField()

    def validate_mobile_number(self, value):
        registration = self.context['registration']
        number = normalize_mobile_number(value)
        if number != normalize_mobile_number(registration.mobile_number):
            raise serializers.ValidationError("Mobile number does not match this registration.")
        return number
