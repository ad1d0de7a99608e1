# Generated for the initial portal schema

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Case',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('status', models.CharField(
                    choices=[
                        ('PENDING', 'Pending Review'),
                        ('APPROVED', 'Approved'),
                        ('REJECTED', 'Rejected'),
                        ('RESOLVED', 'Resolved'),
                    ],
                    db_index=True,
                    default='PENDING',
                    max_length=10,
                    verbose_name='Current Status',
                )),
                ('main_category', models.CharField(
                    choices=[
                        ('education', 'Education'),
                        ('banking', 'Banking'),
                        ('gst', 'GST'),
                        ('income-tax', 'Income Tax'),
                        ('corruption', 'Corruption'),
                        ('political', 'Political'),
                    ],
                    db_index=True,
                    max_length=20,
                    verbose_name='Main Category',
                )),
                ('case_title', models.CharField(max_length=255, verbose_name='Case Title')),
                ('name', models.CharField(max_length=255, verbose_name='Complainant Name')),
                ('email', models.EmailField(blank=True, default='', max_length=254, verbose_name='Contact Email')),
                ('phone_number', models.CharField(max_length=15, verbose_name='Contact Phone Number')),
                ('case_description', models.TextField(verbose_name='Description')),
                ('voice_recording_url', models.URLField(blank=True, default='', max_length=1000, verbose_name='Voice Recording URL')),
                ('voice_recording_duration', models.PositiveIntegerField(blank=True, null=True, verbose_name='Voice Recording Duration (s)')),
                ('gps_latitude', models.FloatField(blank=True, null=True, verbose_name='GPS Latitude')),
                ('gps_longitude', models.FloatField(blank=True, null=True, verbose_name='GPS Longitude')),
                ('captured_address', models.TextField(blank=True, default='', verbose_name='Captured Address')),
                ('reviewed_at', models.DateTimeField(blank=True, null=True, verbose_name='Reviewed At')),
                ('admin_comments', models.TextField(blank=True, default='', verbose_name='Admin Comments')),
                ('rejection_reason', models.TextField(blank=True, default='', verbose_name='Rejection Reason')),
                ('resolved_at', models.DateTimeField(blank=True, null=True, verbose_name='Resolved At')),
                ('is_public', models.BooleanField(db_index=True, default=False, verbose_name='Publicly Visible')),
                ('view_count', models.PositiveIntegerField(default=0, verbose_name='View Count')),
                ('reviewed_by', models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='reviewed_cases',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Reviewed By',
                )),
                ('user', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='cases',
                    to=settings.AUTH_USER_MODEL,
                    verbose_name='Filed By',
                )),
            ],
            options={
                'verbose_name': 'Case',
                'verbose_name_plural': 'Cases',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['user', 'status'], name='cases_case_user_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='Attachment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('file_name', models.CharField(max_length=255, verbose_name='File Name')),
                ('file_url', models.URLField(max_length=1000, verbose_name='File URL')),
                ('file_type', models.CharField(max_length=100, verbose_name='MIME Type')),
                ('file_size', models.PositiveBigIntegerField(default=0, verbose_name='File Size (bytes)')),
                ('storage_path', models.CharField(blank=True, default='', max_length=500, verbose_name='Storage Path')),
                ('case', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='attachments',
                    to='cases.case',
                    verbose_name='Case',
                )),
            ],
            options={
                'verbose_name': 'Attachment',
                'verbose_name_plural': 'Attachments',
                'ordering': ['-created_at'],
            },
        ),
    ]
