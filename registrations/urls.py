"""
URL configuration for registrations app.
"""
from django.urls import path
from registrations.views import (
    AdminCheckView,
    AdminStatsView,
    BroadcastView,
    CampaignHistoryView,
    MirrorCheckView,
    ParticipantApplicationsView,
    ParticipantOccurrencesView,
    ParticipationView,
    RegistrationView,
)

urlpatterns = [
    path('registrations/', RegistrationView.as_view(), name='registration-submit'),
    path('participation/', ParticipationView.as_view(), name='participation-check'),
    path('participants/<str:participant_id>/occurrences/', ParticipantOccurrencesView.as_view(),
         name='participant-occurrences'),
    path('participants/<str:participant_id>/applications/', ParticipantApplicationsView.as_view(),
         name='participant-applications'),
    path('admin/check/', AdminCheckView.as_view(), name='admin-check'),
    path('admin/stats/', AdminStatsView.as_view(), name='admin-stats'),
    path('admin/broadcasts/', BroadcastView.as_view(), name='admin-broadcast'),
    path('admin/campaigns/', CampaignHistoryView.as_view(), name='admin-campaigns'),
    path('admin/mirror-check/', MirrorCheckView.as_view(), name='admin-mirror-check'),
]
