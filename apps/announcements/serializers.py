import logging
from django.db import transaction
from rest_framework import serializers
from core.storage import attach_file, remove_file
from core.utils import validate_image_upload
from .models import Announcement

logger = logging.getLogger(__name__)


class AnnouncementSerializer(serializers.ModelSerializer):
    image = serializers.ImageField(read_only=True)
    upload_image = serializers.ImageField(write_only=True, required=False)
    remove_image = serializers.BooleanField(write_only=True, required=False, default=False)

    class Meta:
        model = Announcement
        fields = ['id', 'title', 'content', 'is_active', 'image', 'upload_image', 'remove_image', 'created_at']
        read_only_fields = ['id', 'image', 'created_at']

    def validate_upload_image(self, value):
        return validate_image_upload(value)

    @transaction.atomic
    def create(self, validated_data):
        upload = validated_data.pop('upload_image', None)
        validated_data.pop('remove_image', None)
        announcement = Announcement.objects.create(**validated_data)
        if upload:
            attach_file(announcement, 'image', upload)
        return announcement

    @transaction.atomic
    def update(self, instance, validated_data):
        upload = validated_data.pop('upload_image', None)
        remove_image = validated_data.pop('remove_image', False)
        instance = super().update(instance, validated_data)
        if upload:
            attach_file(instance, 'image', upload)
        elif remove_image and instance.image:
            remove_file(instance, 'image')
            instance.image = None
            instance.save(update_fields=['image'])
        return instance
