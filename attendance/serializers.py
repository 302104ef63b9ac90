from rest_framework import serializers

from portal.dates import as_datetime
from .models import AttendanceEntry


class DateInputField(serializers.Field):
    """Accepts an ISO date or datetime and returns an aware datetime."""

    def to_internal_value(self, data):
        try:
            return as_datetime(data)
        except (TypeError, ValueError):
            raise serializers.ValidationError("Invalid date. Use YYYY-MM-DD or an ISO datetime.")

    def to_representation(self, value):
        value = as_datetime(value)
        return value.isoformat() if value else None


class AttendanceSerializer(serializers.Serializer):
    date = DateInputField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=AttendanceEntry.STATUS_CHOICES)
    time_in = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)
    time_out = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=20)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class AdminAttendanceSerializer(AttendanceSerializer):
    """Attendance recorded by an admin for a student; status defaults to Present."""
    status = serializers.ChoiceField(choices=AttendanceEntry.STATUS_CHOICES, required=False, default='Present')


class QrAttendanceSerializer(serializers.Serializer):
    qr_token = serializers.CharField()


class ContentSerializer(serializers.Serializer):
    content = serializers.CharField()
