from rest_framework import serializers

from attendance.serializers import DateInputField


class TaskSerializer(serializers.Serializer):
    description = serializers.CharField(allow_blank=True, required=False, default='')
    is_complete = serializers.BooleanField(required=False, default=False)
    due_date = DateInputField(required=False, allow_null=True)


class ProjectCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    assigned_to = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    tasks = TaskSerializer(many=True, required=False, default=list)
    end_date = DateInputField(required=False, allow_null=True)


class ProjectUpdateSerializer(serializers.Serializer):
    # unknown statuses are rejected by the service with a bad_request
    status = serializers.CharField(required=False, allow_null=True)
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class ProjectFeedbackSerializer(serializers.Serializer):
    feedback = serializers.CharField()
    student_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
