from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import PendingStudent, User


@admin.register(User)
class IdentityAdmin(UserAdmin):
    list_display = ['id', 'username', 'name', 'email', 'role', 'is_active', 'last_active']
    list_filter = ['role', 'is_active']
    search_fields = ['username', 'name', 'email']
    fieldsets = UserAdmin.fieldsets + (
        ('Portal', {'fields': ('name', 'role', 'contact_number', 'program', 'university',
                               'graduation_year', 'bio', 'attributes', 'resume', 'profile_picture')}),
    )


@admin.register(PendingStudent)
class PendingStudentAdmin(admin.ModelAdmin):
    list_display = ['id', 'username', 'name', 'email', 'university', 'created_at']
    search_fields = ['username', 'name', 'email']
    exclude = ['password']
