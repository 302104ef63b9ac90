from django.contrib import admin

from .models import Intern, PastIntern


@admin.register(Intern)
class InternAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'email', 'identity', 'joining_date', 'duration', 'progress', 'status']
    list_filter = ['status']
    search_fields = ['name', 'email']


@admin.register(PastIntern)
class PastInternAdmin(admin.ModelAdmin):
    list_display = ['id', 'name', 'email', 'source_intern_id', 'deleted_at']
    search_fields = ['name', 'email']
    readonly_fields = ['source_intern_id', 'attendance', 'daily_progress', 'deleted_projects', 'deleted_at']
