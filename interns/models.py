from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

User = settings.AUTH_USER_MODEL


class InternFields(models.Model):
    name = models.CharField(max_length=150)
    email = models.EmailField()
    joining_date = models.DateTimeField()
    end_date = models.DateTimeField(null=True, blank=True)
    duration = models.IntegerField(default=3, help_text='Internship length in months')
    progress = models.IntegerField(default=0, help_text='Completion percentage')
    project_rating = models.IntegerField(default=0)
    tasks = models.JSONField(default=list, blank=True, help_text='Task names assigned to the intern')
    status = models.CharField(max_length=30, default='Active')
    university = models.CharField(max_length=200, null=True, blank=True)

    class Meta:
        abstract = True


class Intern(InternFields):
    """Employment record of an active intern, optionally linked to a login identity."""
    identity = models.OneToOneField(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='internship')

    class Meta:
        ordering = ['id']

    def __str__(self):
        return self.name


class PastIntern(InternFields):
    """Snapshot taken when an intern is archived. Never edited afterwards."""
    source_intern_id = models.CharField(max_length=64, unique=True)
    identity = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='past_internships')
    attendance = models.JSONField(default=list, encoder=DjangoJSONEncoder)
    daily_progress = models.JSONField(default=list, encoder=DjangoJSONEncoder)
    deleted_at = models.DateTimeField()
    deleted_projects = models.JSONField(default=list, encoder=DjangoJSONEncoder)

    class Meta:
        ordering = ['-deleted_at']

    def __str__(self):
        return f"{self.name} (archived)"
