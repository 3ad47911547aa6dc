from rest_framework import serializers
from .models import ManagementLog


class ManagementLogSerializer(serializers.ModelSerializer):
    admin = serializers.ReadOnlyField(source='admin.username')

    class Meta:
        model = ManagementLog
        fields = ['id', 'admin', 'action', 'details', 'timestamp']
        read_only_fields = fields
