from django.contrib import admin
from .models import ManagementLog


@admin.register(ManagementLog)
class ManagementLogAdmin(admin.ModelAdmin):
    list_display = ('admin', 'action', 'details', 'timestamp')
    list_filter = ('action',)
    search_fields = ('admin__username', 'details')
