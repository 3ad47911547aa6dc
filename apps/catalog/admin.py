from django.contrib import admin
from .models import Category, SubCategory, Program


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name_english', 'name_malayalam', 'actual_fee', 'offer_fee', 'expiry_days', 'is_active', 'created_at')
    list_filter = ('is_active',)
    search_fields = ('name_english', 'name_malayalam')


@admin.register(SubCategory)
class SubCategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'created_at')
    list_filter = ('category',)
    search_fields = ('name', 'category__name_english')


@admin.register(Program)
class ProgramAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'sub_category', 'is_top', 'priority', 'is_active')
    list_filter = ('is_active', 'is_top', 'category')
    search_fields = ('name', 'category__name_english')
