from django.contrib.auth.models import AbstractUser
from django.db import models


def default_notification_settings():
    return {
        'email_notifications': True,
        'attendance_alerts': True,
        'project_updates': True,
        'system_alerts': True,
    }


def default_security_settings():
    return {
        'two_factor_auth': False,
        'require_password_reset': False,
        'session_timeout': 30,
    }


class ProfileFields(models.Model):
    """Registration profile shared by identities and pending students."""
    name = models.CharField(max_length=150)
    contact_number = models.CharField(max_length=20, null=True, blank=True, help_text='Phone number with country code')
    program = models.CharField(max_length=150, null=True, blank=True)
    university = models.CharField(max_length=200, null=True, blank=True)
    graduation_year = models.IntegerField(null=True, blank=True)
    bio = models.TextField(null=True, blank=True)
    attributes = models.JSONField(default=dict, blank=True, help_text='Free-form profile attributes such as skills')
    notification_settings = models.JSONField(default=default_notification_settings)
    security_settings = models.JSONField(default=default_security_settings)

    class Meta:
        abstract = True


class User(ProfileFields, AbstractUser):
    """Login-capable identity: a student or an admin."""
    ROLE_CHOICES = [
        ('student', 'Student'),
        ('admin', 'Admin'),
    ]

    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='student')
    department = models.CharField(max_length=150, null=True, blank=True)
    domain = models.CharField(max_length=150, null=True, blank=True)
    resume = models.CharField(max_length=500, null=True, blank=True, help_text='Stored location of the uploaded resume')
    profile_picture = models.CharField(max_length=500, null=True, blank=True)
    last_active = models.DateTimeField(null=True, blank=True)

    REQUIRED_FIELDS = ['email', 'name']

    class Meta:
        indexes = [
            models.Index(fields=['role'], name='accounts_user_role_idx'),
        ]

    def __str__(self):
        return self.username


class PendingStudent(ProfileFields):
    """Self-registered account waiting for admin approval."""
    email = models.EmailField(unique=True)
    username = models.CharField(max_length=150, unique=True)
    password = models.CharField(max_length=128, help_text='Hashed password')
    created_at = models.DateTimeField()

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"{self.username} (pending)"
