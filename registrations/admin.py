"""
Django admin configuration for registrations app.
"""
from django.contrib import admin
from registrations.models import Registration, NotificationAttempt


class ReadOnlyAdmin(admin.ModelAdmin):
    """Both ledgers are append-only: no manual add, edit or delete."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Registration)
class RegistrationAdmin(ReadOnlyAdmin):
    """Admin interface for Registration model."""

    list_display = ('id', 'participant_id', 'participant_name', 'occurrence_id', 'group_name', 'submitted_at')
    list_filter = ('occurrence_id', 'received_at')
    search_fields = ('participant_id', 'participant_name', 'contact_phone')

    fieldsets = (
        ('Participant', {
            'fields': ('participant_id', 'participant_name', 'contact_phone')
        }),
        ('Group', {
            'fields': ('group_id', 'group_name')
        }),
        ('Occurrence', {
            'fields': ('occurrence_id', 'occurrence_name')
        }),
        ('Timestamps', {
            'fields': ('submitted_at', 'received_at')
        }),
    )
    readonly_fields = ('received_at',)


@admin.register(NotificationAttempt)
class NotificationAttemptAdmin(ReadOnlyAdmin):
    """Admin interface for NotificationAttempt model."""

    list_display = ('id', 'campaign_key', 'recipient_id', 'attempted_at', 'succeeded')
    list_filter = ('succeeded', 'occurrence_id', 'attempted_at')
    search_fields = ('campaign_key', 'recipient_id')

    fieldsets = (
        ('Campaign', {
            'fields': ('campaign_key', 'occurrence_id', 'target_date')
        }),
        ('Delivery', {
            'fields': ('recipient_id', 'attempted_at', 'succeeded', 'error_message')
        }),
    )
    readonly_fields = ('attempted_at',)
