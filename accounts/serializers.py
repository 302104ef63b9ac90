from rest_framework import serializers


class RegistrationSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True)
    contact_number = serializers.CharField(required=False, allow_blank=True, max_length=20)
    program = serializers.CharField(required=False, allow_blank=True, max_length=150)
    university = serializers.CharField(required=False, allow_blank=True, max_length=200)
    graduation_year = serializers.IntegerField(required=False, allow_null=True)
    bio = serializers.CharField(required=False, allow_blank=True)


class LoginSerializer(serializers.Serializer):
    identifier = serializers.CharField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True)
    email = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)

    def validate(self, data):
        # The identifier may be sent as identifier, username or email
        data['identifier'] = data.get('identifier') or data.get('username') or data.get('email') or ''
        return data


class ProfileUpdateSerializer(serializers.Serializer):
    contact_number = serializers.CharField(required=False, allow_blank=True, max_length=20)
    bio = serializers.CharField(required=False, allow_blank=True)
    skills = serializers.JSONField(required=False)


class AdminProfileSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True, max_length=150)


class PasswordChangeSerializer(serializers.Serializer):
    current_password = serializers.CharField(required=False, allow_blank=True)
    new_password = serializers.CharField(required=False, allow_blank=True)


class NotificationSettingsSerializer(serializers.Serializer):
    email_notifications = serializers.BooleanField(required=False, allow_null=True)
    attendance_alerts = serializers.BooleanField(required=False, allow_null=True)
    project_updates = serializers.BooleanField(required=False, allow_null=True)
    system_alerts = serializers.BooleanField(required=False, allow_null=True)


class SecuritySettingsSerializer(serializers.Serializer):
    two_factor_auth = serializers.BooleanField(required=False, allow_null=True)
    require_password_reset = serializers.BooleanField(required=False, allow_null=True)
    session_timeout = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class FeedbackSerializer(serializers.Serializer):
    feedback = serializers.CharField()
    student_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class UploadSerializer(serializers.Serializer):
    file = serializers.FileField()
