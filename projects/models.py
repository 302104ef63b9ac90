from django.conf import settings
from django.db import models

User = settings.AUTH_USER_MODEL


class Project(models.Model):
    NOT_STARTED = 'Not Started'
    INCOMPLETE = 'Incomplete'
    IN_PROGRESS = 'In Progress'
    UNDER_REVIEW = 'Under Review'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'

    STATUS_CHOICES = [
        (NOT_STARTED, 'Not Started'),
        (INCOMPLETE, 'Incomplete'),
        (IN_PROGRESS, 'In Progress'),
        (UNDER_REVIEW, 'Under Review'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    title = models.CharField(max_length=200)
    description = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=NOT_STARTED)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField(null=True, blank=True)
    assigned_to = models.ManyToManyField(User, through='Assignment', related_name='assigned_projects', blank=True)
    created_by = models.CharField(max_length=150, default='admin')
    last_modified = models.DateTimeField()

    class Meta:
        ordering = ['id']
        indexes = [
            models.Index(fields=['status'], name='projects_status_idx'),
        ]

    def __str__(self):
        return f"{self.title} - {self.status}"


class Assignment(models.Model):
    """Link between a project and an assigned identity, kept in assignment order."""
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='assignments')
    identity = models.ForeignKey(User, on_delete=models.CASCADE, related_name='assignments')

    class Meta:
        ordering = ['id']
        unique_together = ('project', 'identity')

    def __str__(self):
        return f"{self.project_id} -> {self.identity_id}"


class ProjectTask(models.Model):
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='tasks')
    description = models.CharField(max_length=500, blank=True)
    is_complete = models.BooleanField(default=False)
    due_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['id']


class ProjectFeedback(models.Model):
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='feedback')
    comment = models.TextField(blank=True)
    date = models.DateTimeField()
    sender = models.CharField(max_length=150, blank=True, help_text='Who left the feedback')
    student_id = models.CharField(max_length=64, null=True, blank=True, help_text='Student the feedback concerns')

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.sender}: {self.comment[:40]}"
