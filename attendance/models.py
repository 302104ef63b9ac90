from django.conf import settings
from django.db import models
from interns.models import Intern

User = settings.AUTH_USER_MODEL


class AttendanceEntry(models.Model):
    """
    One attendance mark. Self-reported marks belong to an identity,
    admin-recorded marks for an intern belong to the intern record.
    """
    STATUS_CHOICES = [
        ('Present', 'Present'),
        ('Absent', 'Absent'),
        ('Late', 'Late'),
        ('Half-Day', 'Half-Day'),
        ('Leave', 'Leave'),
    ]

    identity = models.ForeignKey(User, on_delete=models.CASCADE, null=True, blank=True, related_name='attendance')
    intern = models.ForeignKey(Intern, on_delete=models.CASCADE, null=True, blank=True, related_name='attendance')
    date = models.DateTimeField()
    status = models.CharField(max_length=10, choices=STATUS_CHOICES)
    time_in = models.CharField(max_length=20, null=True, blank=True)
    time_out = models.CharField(max_length=20, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['identity', 'date'], name='attendance_identity_date_idx'),
            models.Index(fields=['intern', 'date'], name='attendance_intern_date_idx'),
        ]

    def __str__(self):
        return f"{self.date:%Y-%m-%d} - {self.status}"


class ProgressUpdate(models.Model):
    identity = models.ForeignKey(User, on_delete=models.CASCADE, null=True, blank=True, related_name='progress_updates')
    intern = models.ForeignKey(Intern, on_delete=models.CASCADE, null=True, blank=True, related_name='daily_progress')
    content = models.TextField()
    timestamp = models.DateTimeField()
    feedback = models.TextField(null=True, blank=True)
    has_admin_feedback = models.BooleanField(default=False)
    feedback_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['identity', 'timestamp'], name='progress_identity_ts_idx'),
        ]

    def __str__(self):
        return self.content[:50]
