from django.contrib import admin
from .models import Course


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ['name', 'course_type', 'duration_minutes', 'capacity', 'price', 'is_monthly', 'is_active']
    list_filter = ['course_type', 'is_monthly', 'is_active']
    search_fields = ['name']
    list_editable = ['is_active', 'price']
    readonly_fields = ['id', 'created_at', 'updated_at']
    fieldsets = (
        ('Course Info', {'fields': ('id', 'name', 'description', 'course_type')}),
        ('Scheduling', {'fields': ('duration_minutes', 'capacity')}),
        ('Billing', {'fields': ('price', 'is_monthly', 'sessions_per_month')}),
        ('Status', {'fields': ('is_active',)}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
