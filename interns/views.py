from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole
from attendance.serializers import AttendanceSerializer, ContentSerializer, QrAttendanceSerializer
from portal.serializers import validated
from storage import get_store

from .lifecycle import InternLifecycle
from .serializers import CredentialsSerializer, InternCreateSerializer, InternUpdateSerializer


class InternViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def get_permissions(self):
        # QR check-in is authorized by the QR token itself
        if self.action == 'qr_attendance':
            return [permissions.AllowAny()]
        return super().get_permissions()

    def list(self, request):
        return Response(InternLifecycle(get_store()).list_interns())

    def create(self, request):
        result = InternLifecycle(get_store()).create(**validated(InternCreateSerializer, request))
        return Response(result, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return Response(InternLifecycle(get_store()).get_intern(pk))

    def update(self, request, pk=None):
        return Response(InternLifecycle(get_store()).update(pk, **validated(InternUpdateSerializer, request)))

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        past = InternLifecycle(get_store()).archive(pk)
        return Response({"message": "Intern moved to past interns successfully", "past_intern_id": past['id']})

    @action(detail=True, methods=['post'])
    def progress(self, request, pk=None):
        data = validated(ContentSerializer, request)
        result = InternLifecycle(get_store()).record_progress(pk, data['content'])
        return Response(dict(result, message="Progress updated successfully"), status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def attendance(self, request, pk=None):
        entry = InternLifecycle(get_store()).record_attendance(pk, **validated(AttendanceSerializer, request))
        return Response({"message": "Attendance recorded successfully", "attendance": entry},
                        status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='attendance/qr')
    def qr_attendance(self, request, pk=None):
        data = validated(QrAttendanceSerializer, request)
        entry = InternLifecycle(get_store()).mark_qr_attendance(pk, data['qr_token'])
        return Response({"message": "Attendance recorded successfully via QR code!", "attendance": entry},
                        status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['put'])
    def credentials(self, request, pk=None):
        InternLifecycle(get_store()).update_credentials(pk, **validated(CredentialsSerializer, request))
        return Response({"message": "Credentials updated successfully"})


class PastInternListView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def get(self, request):
        return Response(InternLifecycle(get_store()).list_past())


class PastInternDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def get(self, request, pk):
        return Response(InternLifecycle(get_store()).get_past(pk))
