from django.contrib import admin

from .models import AttendanceEntry, ProgressUpdate


@admin.register(AttendanceEntry)
class AttendanceEntryAdmin(admin.ModelAdmin):
    list_display = ['id', 'identity', 'intern', 'date', 'status']
    list_filter = ['date', 'status']


@admin.register(ProgressUpdate)
class ProgressUpdateAdmin(admin.ModelAdmin):
    list_display = ['id', 'identity', 'intern', 'timestamp', 'has_admin_feedback']
    list_filter = ['has_admin_feedback']
