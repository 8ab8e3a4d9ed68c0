# Generated migration for Registration and NotificationAttempt models

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Registration',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('participant_id', models.CharField(db_index=True, max_length=64)),
                ('participant_name', models.CharField(blank=True, default='', max_length=255)),
                ('group_id', models.CharField(blank=True, default='', max_length=64)),
                ('group_name', models.CharField(blank=True, default='', max_length=255)),
                ('occurrence_id', models.CharField(db_index=True, max_length=64)),
                ('occurrence_name', models.CharField(blank=True, default='', max_length=255)),
                ('contact_phone', models.CharField(blank=True, default='', max_length=32)),
                ('submitted_at', models.DateTimeField()),
                ('received_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='NotificationAttempt',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('campaign_key', models.CharField(db_index=True, max_length=128)),
                ('recipient_id', models.CharField(max_length=64)),
                ('occurrence_id', models.CharField(max_length=64)),
                ('target_date', models.CharField(max_length=32)),
                ('attempted_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('succeeded', models.BooleanField(default=False)),
                ('error_message', models.TextField(blank=True, null=True)),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.AddConstraint(
            model_name='registration',
            constraint=models.UniqueConstraint(fields=('participant_id', 'occurrence_id'), name='unique_participant_occurrence'),
        ),
        migrations.AddConstraint(
            model_name='notificationattempt',
            constraint=models.UniqueConstraint(fields=('campaign_key', 'recipient_id'), name='unique_campaign_recipient'),
        ),
        migrations.AddIndex(
            model_name='notificationattempt',
            index=models.Index(fields=['campaign_key', 'attempted_at'], name='registratio_campaig_7c1e2a_idx'),
        ),
    ]
