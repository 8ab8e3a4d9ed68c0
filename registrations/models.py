"""
Data models for the tournament registration gateway.
"""
from django.db import models


class Registration(models.Model):
    """
    A participant's accepted sign-up for one occurrence.
    Identifiers are stored in canonical string form; rows are never
    updated or deleted once written.
    """

    participant_id = models.CharField(max_length=64, db_index=True)
    participant_name = models.CharField(max_length=255, blank=True, default='')
    group_id = models.CharField(max_length=64, blank=True, default='')
    group_name = models.CharField(max_length=255, blank=True, default='')
    occurrence_id = models.CharField(max_length=64, db_index=True)
    occurrence_name = models.CharField(max_length=255, blank=True, default='')
    contact_phone = models.CharField(max_length=32, blank=True, default='')
    submitted_at = models.DateTimeField()
    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['participant_id', 'occurrence_id'],
                name='unique_participant_occurrence',
            ),
        ]

    def __str__(self):
        return f"Registration {self.participant_id} -> {self.occurrence_id}"


class NotificationAttempt(models.Model):
    """
    Records one notification send for a (campaign, recipient) pair.
    Whether it succeeded or not, the recipient counts as processed for
    that campaign.
    """

    campaign_key = models.CharField(max_length=128, db_index=True)
    recipient_id = models.CharField(max_length=64)
    occurrence_id = models.CharField(max_length=64)
    target_date = models.CharField(max_length=32)
    attempted_at = models.DateTimeField(auto_now_add=True, db_index=True)
    succeeded = models.BooleanField(default=False)
    error_message = models.TextField(null=True, blank=True)

    class Meta:
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['campaign_key', 'recipient_id'],
                name='unique_campaign_recipient',
            ),
        ]
        indexes = [
            models.Index(fields=['campaign_key', 'attempted_at'], name='registratio_campaig_7c1e2a_idx'),
        ]

    def __str__(self):
        return f"Attempt {self.campaign_key} -> {self.recipient_id} - {'Success' if self.succeeded else 'Failed'}"
