import math
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone
from core.constants import CATEGORY_QR_DIR
from core.utils import file_extension


def category_qr_path(instance, filename):
    return f"{CATEGORY_QR_DIR}/{instance.pk}/payment-qr{file_extension(filename)}"


class Category(models.Model):
    name_english = models.CharField(max_length=200)
    name_malayalam = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    actual_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    offer_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    offer_start_date = models.DateTimeField(null=True, blank=True)
    offer_end_date = models.DateTimeField(null=True, blank=True)
    expiry_days = models.PositiveIntegerField(default=30)
    is_active = models.BooleanField(default=True)
    qr_code = models.ImageField(upload_to=category_qr_path, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'categories'
        ordering = ['-created_at']
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name_english

    @property
    def is_job_card(self):
        """Job card categories allow transfers into programs of any category."""
        return settings.JOB_CARD_KEYWORD.lower() in (self.name_english or '').lower()

    def is_offer_active(self, now=None):
        if not self.offer_start_date or not self.offer_end_date:
            return True
        now = now or timezone.now()
        return self.offer_start_date <= now <= self.offer_end_date

    def offer_days_remaining(self, now=None):
        if not self.offer_end_date:
            return None
        now = now or timezone.now()
        return math.ceil((self.offer_end_date - now).total_seconds() / 86400)

    @property
    def display_fee(self):
        if self.offer_fee > 0 and self.offer_fee < self.actual_fee:
            return self.offer_fee
        return self.actual_fee if self.actual_fee > 0 else self.offer_fee


class SubCategory(models.Model):
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='sub_categories')
    name = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'sub_categories'
        ordering = ['name']
        verbose_name_plural = 'Sub categories'

    def __str__(self):
        return f"{self.name} ({self.category.name_english})"


class Program(models.Model):
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='programs')
    sub_category = models.ForeignKey(
        SubCategory, on_delete=models.PROTECT, null=True, blank=True, related_name='programs'
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    is_top = models.BooleanField(default=False)
    priority = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'programs'
        ordering = ['category', '-priority']

    def __str__(self):
        return self.name

    def clean(self):
        if self.sub_category_id and self.sub_category.category_id != self.category_id:
            raise ValidationError({'sub_category': "Subcategory does not belong to the selected category."})
