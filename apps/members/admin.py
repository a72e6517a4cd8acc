from django.contrib import admin
from .models import Profile


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'email', 'phone', 'auth_subject', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['full_name', 'email', 'phone', 'auth_subject']
    readonly_fields = ['id', 'auth_subject', 'created_at', 'updated_at']
