# Generated manually on 2026-10-17

import django.core.serializers.json
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Intern',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150)),
                ('email', models.EmailField(max_length=254)),
                ('joining_date', models.DateTimeField()),
                ('end_date', models.DateTimeField(blank=True, null=True)),
                ('duration', models.IntegerField(default=3, help_text='Internship length in months')),
                ('progress', models.IntegerField(default=0, help_text='Completion percentage')),
                ('project_rating', models.IntegerField(default=0)),
                ('tasks', models.JSONField(blank=True, default=list, help_text='Task names assigned to the intern')),
                ('status', models.CharField(default='Active', max_length=30)),
                ('university', models.CharField(blank=True, max_length=200, null=True)),
                ('identity', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='internship', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='PastIntern',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=150)),
                ('email', models.EmailField(max_length=254)),
                ('joining_date', models.DateTimeField()),
                ('end_date', models.DateTimeField(blank=True, null=True)),
                ('duration', models.IntegerField(default=3, help_text='Internship length in months')),
                ('progress', models.IntegerField(default=0, help_text='Completion percentage')),
                ('project_rating', models.IntegerField(default=0)),
                ('tasks', models.JSONField(blank=True, default=list, help_text='Task names assigned to the intern')),
                ('status', models.CharField(default='Active', max_length=30)),
                ('university', models.CharField(blank=True, max_length=200, null=True)),
                ('source_intern_id', models.CharField(max_length=64, unique=True)),
                ('attendance', models.JSONField(default=list, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('daily_progress', models.JSONField(default=list, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('deleted_at', models.DateTimeField()),
                ('deleted_projects', models.JSONField(default=list, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('identity', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='past_internships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-deleted_at'],
            },
        ),
    ]
