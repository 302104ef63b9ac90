from django.contrib import admin

from .models import Assignment, Project, ProjectFeedback, ProjectTask


class ProjectTaskInline(admin.TabularInline):
    model = ProjectTask
    extra = 0


class ProjectFeedbackInline(admin.TabularInline):
    model = ProjectFeedback
    extra = 0


class AssignmentInline(admin.TabularInline):
    model = Assignment
    extra = 0


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ['id', 'title', 'status', 'start_date', 'end_date', 'last_modified']
    list_filter = ['status']
    search_fields = ['title', 'description']
    inlines = [AssignmentInline, ProjectTaskInline, ProjectFeedbackInline]
