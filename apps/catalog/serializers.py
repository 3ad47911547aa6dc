from rest_framework import serializers
from core.utils import validate_image_upload
from .models import Category, SubCategory, Program


class CategorySerializer(serializers.ModelSerializer):
    qr_code = serializers.ImageField(read_only=True)
    is_job_card = serializers.BooleanField(read_only=True)

    class Meta:
        model = Category
        fields = [
            'id', 'name_english', 'name_malayalam', 'description', 'actual_fee',
            'offer_fee', 'offer_start_date', 'offer_end_date', 'expiry_days',
            'is_active', 'qr_code', 'is_job_card', 'created_at'
        ]
        read_only_fields = ['id', 'qr_code', 'is_job_card', 'created_at']
        extra_kwargs = {
            'name_english': {'allow_blank': False},
            'name_malayalam': {'allow_blank': False},
        }

    def validate(self, data):
        start = data.get('offer_start_date', getattr(self.instance, 'offer_start_date', None))
        end = data.get('offer_end_date', getattr(self.instance, 'offer_end_date', None))
        if start and end and start > end:
            raise serializers.ValidationError("Offer start date must be before the offer end date.")
        return data


class PublicCategorySerializer(serializers.ModelSerializer):
    """Category card as shown to customers, with the offer countdown."""
    qr_code = serializers.ImageField(read_only=True)
    is_job_card = serializers.BooleanField(read_only=True)
    is_offer_active = serializers.SerializerMethodField()
    offer_days_remaining = serializers.SerializerMethodField()
    display_fee = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Category
        fields = [
            'id', 'name_english', 'name_malayalam', 'description', 'actual_fee',
            'offer_fee', 'display_fee', 'offer_start_date', 'offer_end_date',
            'is_offer_active', 'offer_days_remaining', 'expiry_days', 'is_active',
            'is_job_card', 'qr_code'
        ]

    def get_is_offer_active(self, obj):
        return obj.is_offer_active()

    def get_offer_days_remaining(self, obj):
        return obj.offer_days_remaining()


class CategoryQRUploadSerializer(serializers.Serializer):
    qr_code = serializers.ImageField()

    def validate_qr_code(self, value):
        return validate_image_upload(value)


class SubCategorySerializer(serializers.ModelSerializer):
    category_id = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), source='category'
    )

    class Meta:
        model = SubCategory
        fields = ['id', 'category_id', 'name', 'created_at']
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {'name': {'allow_blank': False}}


class ProgramSerializer(serializers.ModelSerializer):
    category_id = serializers.PrimaryKeyRelatedField(
        queryset=Category.objects.all(), source='category'
    )
    sub_category_id = serializers.PrimaryKeyRelatedField(
        queryset=SubCategory.objects.all(), source='sub_category',
        required=False, allow_null=True
    )
    category_name = serializers.ReadOnlyField(source='category.name_english')
    sub_category_name = serializers.SerializerMethodField()

    class Meta:
        model = Program
        fields = [
            'id', 'category_id', 'category_name', 'sub_category_id', 'sub_category_name',
            'name', 'description', 'is_top', 'priority', 'is_active', 'created_at'
        ]
        read_only_fields = ['id', 'created_at']
        extra_kwargs = {'name': {'allow_blank': False}}

    def validate(self, data):
        category = data.get('category', getattr(self.instance, 'category', None))
        sub_category = data.get('sub_category', getattr(self.instance, 'sub_category', None))
        if sub_category and category and sub_category.category_id != category.id:
            raise serializers.ValidationError({"sub_category_id": "Subcategory does not belong to the selected category."})
        return data

    def get_sub_category_name(self, obj):
        return obj.sub_category.name if obj.sub_category_id else None


class ProgramSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Program
        fields = ['id', 'name', 'description']
