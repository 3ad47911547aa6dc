from django.contrib import admin
from .models import Registration


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ('customer_id', 'full_name', 'mobile_number', 'category', 'program', 'created_at')
    list_filter = ('category',)
    search_fields = ('customer_id', 'full_name', 'mobile_number')
    readonly_fields = ('customer_id', 'created_at', 'updated_at')
