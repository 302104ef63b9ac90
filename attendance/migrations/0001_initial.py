# Generated manually on 2026-10-17

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('interns', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='AttendanceEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateTimeField()),
                ('status', models.CharField(choices=[('Present', 'Present'), ('Absent', 'Absent'), ('Late', 'Late'), ('Half-Day', 'Half-Day'), ('Leave', 'Leave')], max_length=10)),
                ('time_in', models.CharField(blank=True, max_length=20, null=True)),
                ('time_out', models.CharField(blank=True, max_length=20, null=True)),
                ('notes', models.TextField(blank=True, null=True)),
                ('identity', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='attendance', to=settings.AUTH_USER_MODEL)),
                ('intern', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='attendance', to='interns.intern')),
            ],
            options={
                'ordering': ['id'],
                'indexes': [
                    models.Index(fields=['identity', 'date'], name='attendance_identity_date_idx'),
                    models.Index(fields=['intern', 'date'], name='attendance_intern_date_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ProgressUpdate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('content', models.TextField()),
                ('timestamp', models.DateTimeField()),
                ('feedback', models.TextField(blank=True, null=True)),
                ('has_admin_feedback', models.BooleanField(default=False)),
                ('feedback_date', models.DateTimeField(blank=True, null=True)),
                ('identity', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='progress_updates', to=settings.AUTH_USER_MODEL)),
                ('intern', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='daily_progress', to='interns.intern')),
            ],
            options={
                'ordering': ['id'],
                'indexes': [models.Index(fields=['identity', 'timestamp'], name='progress_identity_ts_idx')],
            },
        ),
    ]
