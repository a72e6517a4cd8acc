from django.contrib import admin
from .models import Booking, BookingStatusLog, CourseSlotLock


class BookingStatusLogInline(admin.TabularInline):
    model = BookingStatusLog
    extra = 0
    readonly_fields = ['from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    can_delete = False


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ['short_id', 'profile', 'course', 'start_time', 'end_time', 'status']
    list_filter = ['status', 'course']
    search_fields = ['profile__full_name', 'profile__email', 'course__name']
    # Bookings are created by the engine only; the admin may read and cancel
    readonly_fields = ['id', 'course', 'profile', 'start_time', 'end_time', 'cancelled_at', 'created_at', 'updated_at']
    date_hierarchy = 'start_time'
    inlines = [BookingStatusLogInline]
    actions = ['cancel_bookings']
    fieldsets = (
        ('Booking', {'fields': ('id', 'course', 'profile')}),
        ('Schedule', {'fields': ('start_time', 'end_time')}),
        ('Status', {'fields': ('status', 'cancelled_at', 'notes')}),
        ('Audit', {'fields': ('created_at', 'updated_at'), 'classes': ('collapse',)}),
    )

    def has_add_permission(self, request):
        return False

    def get_readonly_fields(self, request, obj=None):
        return self.readonly_fields + ['status']

    @admin.display(description='ID')
    def short_id(self, obj):
        return obj.id_short

    @admin.action(description='Cancel selected bookings')
    def cancel_bookings(self, request, queryset):
        for booking in queryset:
            booking.cancel(changed_by=f'admin:{request.user.get_username()}')


@admin.register(CourseSlotLock)
class CourseSlotLockAdmin(admin.ModelAdmin):
    list_display = ['course', 'hour_start', 'created_at']
    list_filter = ['course']
    readonly_fields = ['id', 'course', 'hour_start', 'created_at']


@admin.register(BookingStatusLog)
class BookingStatusLogAdmin(admin.ModelAdmin):
    list_display = ['booking', 'from_status', 'to_status', 'changed_by', 'changed_at']
    readonly_fields = ['id', 'booking', 'from_status', 'to_status', 'changed_by', 'reason', 'changed_at']
    search_fields = ['booking__profile__full_name']
