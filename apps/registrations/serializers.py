import re
from rest_framework import serializers
from apps.catalog.models import Category, Program
from apps.catalog.serializers import ProgramSummarySerializer
from .models import Registration


def normalize_mobile_number(value):
    number = re.sub(r'[\s\-]', '', value or '')
    if not re.match(r'^\+?\d{10,15}$', number):
        raise serializers.ValidationError("Enter a valid mobile number.")
    return number


class CategorySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name_english', 'name_malayalam']


class RegistrationSerializer(serializers.ModelSerializer):
    category = CategorySummarySerializer(read_only=True)
    program = ProgramSummarySerializer(read_only=True)
    category_id = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), source='category', write_only=True
    )
    program_id = serializers.PrimaryKeyRelatedField(
        queryset=Program.objects.all(), source='program', write_only=True,
        required=False, allow_null=True
    )

    class Meta:
        model = Registration
        fields = [
            'id', 'customer_id', 'full_name', 'mobile_number', 'category', 'category_id',
            'program', 'program_id', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'customer_id', 'created_at', 'updated_at']

    def validate_mobile_number(self, value):
        return normalize_mobile_number(value)

    def validate(self, data):
        category = data.get('category', getattr(self.instance, 'category', None))
        program = data.get('program', getattr(self.instance, 'program', None))
        if program and category and program.category_id != category.id:
            raise serializers.ValidationError({"program_id": "Program does not belong to the selected category."})
        return data


class PublicRegistrationSerializer(RegistrationSerializer):
    """Registration submitted from the public form: only active categories and programs."""

    def validate(self, data):
        data = super().validate(data)
        if not data['category'].is_active:
            raise serializers.ValidationError({"category_id": "This category is not open for registration."})
        program = data.get('program')
        if program and not program.is_active:
            raise serializers.ValidationError({"program_id": "This program is not open for registration."})
        return data


class RegistrationLookupSerializer(serializers.Serializer):
    mobile_number = serializers.CharField(required=False)
    customer_id = serializers.CharField(required=False)

    def validate_mobile_number(self, value):
        return normalize_mobile_number(value)

    def validate(self, data):
        if not data.get('mobile_number') and not data.get('customer_id'):
            raise serializers.ValidationError("Provide a mobile number or a customer ID.")
        return data
