from rest_framework import serializers

from attendance.serializers import DateInputField


class TaskListField(serializers.Field):
    """Task names as a list or a comma separated string."""

    def to_internal_value(self, data):
        if isinstance(data, str):
            return data
        if isinstance(data, list) and all(isinstance(task, str) for task in data):
            return data
        raise serializers.ValidationError("Tasks must be a list of names or a comma separated string.")

    def to_representation(self, value):
        return value


class InternCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    duration = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    tasks = TaskListField(required=False)
    username = serializers.CharField(required=False, allow_blank=True, max_length=150)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)
    identity_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    joining_date = DateInputField(required=False, allow_null=True)
    university = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=200)


class InternUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    joining_date = DateInputField(required=False, allow_null=True)
    duration = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    tasks = TaskListField(required=False)


class CredentialsSerializer(serializers.Serializer):
    username = serializers.CharField(required=False, allow_blank=True, max_length=150)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)

    def validate(self, data):
        if not data.get('username') and not data.get('password'):
            raise serializers.ValidationError("Username or password is required.")
        return data
