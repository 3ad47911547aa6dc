from django.contrib import admin
from .models import JobTransferRequest


@admin.register(JobTransferRequest)
class JobTransferRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'customer_id', 'full_name', 'from_program', 'to_program', 'status', 'requested_at', 'processed_by')
    list_filter = ('status',)
    search_fields = ('customer_id', 'full_name', 'mobile_number')
    readonly_fields = ('requested_at', 'processed_at', 'processed_by')
