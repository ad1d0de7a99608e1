# Generated for the initial portal schema

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('notification_type', models.CharField(
                    choices=[
                        ('CASE_SUBMITTED', 'Case Submitted'),
                        ('CASE_APPROVED', 'Case Approved'),
                        ('CASE_REJECTED', 'Case Rejected'),
                        ('CASE_RESOLVED', 'Case Resolved'),
                        ('ROLE_CHANGED', 'Role Changed'),
                        ('STATUS_CHANGED', 'Account Status Changed'),
                        ('ADMIN_ALERT', 'Admin Alert'),
                    ],
                    default='ADMIN_ALERT',
                    max_length=20,
                    verbose_name='Type',
                )),
                ('title', models.CharField(max_length=255, verbose_name='Title')),
                ('message', models.TextField(verbose_name='Message')),
                ('is_read', models.BooleanField(default=False, verbose_name='Read')),
                ('object_id', models.PositiveIntegerField(blank=True, null=True, verbose_name='Related Object ID')),
                ('content_type', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.CASCADE,
                    to='contenttypes.contenttype',
                    verbose_name='Related Content Type',
                )),
                ('recipient', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='notifications',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Recipient',
                )),
            ],
            options={
                'verbose_name': 'Notification',
                'verbose_name_plural': 'Notifications',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['recipient', 'is_read'], name='core_notif_recipient_read_idx')],
            },
        ),
    ]
