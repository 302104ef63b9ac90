from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from attendance.serializers import AdminAttendanceSerializer, ContentSerializer, QrAttendanceSerializer
from portal.serializers import validated
from storage import get_store

from .identities import IdentityService
from .media import store_upload
from .permissions import IsAdminRole, caller_from
from .registration import RegistrationService
from .serializers import (
    AdminProfileSerializer,
    FeedbackSerializer,
    LoginSerializer,
    NotificationSettingsSerializer,
    PasswordChangeSerializer,
    ProfileUpdateSerializer,
    RegistrationSerializer,
    SecuritySettingsSerializer,
    UploadSerializer,
)


# ---- Registration & login ----
class RegisterView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        data = validated(RegistrationSerializer, request)
        RegistrationService(get_store()).register(**data)
        return Response(
            {"message": "Registration request submitted successfully. Awaiting admin approval."},
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request):
        data = validated(LoginSerializer, request)
        result = RegistrationService(get_store()).login(data['identifier'], data.get('password'))
        return Response(result)


class PendingRegistrationViewSet(viewsets.ViewSet):
    """Admin review of self-service registrations."""
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def list(self, request):
        return Response(RegistrationService(get_store()).list_pending())

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        identity = RegistrationService(get_store()).approve(pk)
        return Response({"message": "Registration approved", "student": identity})

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        RegistrationService(get_store()).reject(pk)
        return Response({"message": "Registration rejected"})


# ---- Student self-service ----
class StudentProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, pk):
        return Response(IdentityService(get_store()).profile(pk, caller_from(request)))


class OwnProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request):
        data = validated(ProfileUpdateSerializer, request)
        student = IdentityService(get_store()).update_profile(caller_from(request)['id'], **data)
        return Response({"message": "Profile updated successfully", "student": student})


class ProgressUpdatesView(APIView):
    """General progress updates of the logged-in student."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(IdentityService(get_store()).progress_updates(caller_from(request)['id']))

    def post(self, request):
        data = validated(ContentSerializer, request)
        update = IdentityService(get_store()).submit_progress_update(caller_from(request)['id'], data['content'])
        return Response(update, status=status.HTTP_201_CREATED)


class UploadView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    def post(self, request, kind):
        data = validated(UploadSerializer, request)
        reference = store_upload(kind, data['file'])
        IdentityService(get_store()).set_reference(caller_from(request)['id'], kind, reference)
        return Response({"message": "File uploaded successfully", kind: reference}, status=status.HTTP_201_CREATED)


# ---- Admin ----
class StudentViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def get_permissions(self):
        # students may read their own attendance
        if self.action == 'attendance' and self.request.method == 'GET':
            return [permissions.IsAuthenticated()]
        return super().get_permissions()

    def list(self, request):
        return Response(IdentityService(get_store()).list_students())

    def retrieve(self, request, pk=None):
        return Response(IdentityService(get_store()).get_student(pk))

    @action(detail=True, methods=['get', 'post'])
    def attendance(self, request, pk=None):
        service = IdentityService(get_store())
        caller = caller_from(request)
        if request.method == 'GET':
            return Response(service.attendance(pk, caller))
        data = validated(AdminAttendanceSerializer, request)
        entry = service.record_attendance(pk, recorded_by=request.auth.get('name') or 'Admin', **data)
        return Response({"message": "Attendance recorded successfully!", "attendance": entry},
                        status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def credentials(self, request, pk=None):
        return Response(IdentityService(get_store()).credentials(pk))


class StudentQrAttendanceView(APIView):
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    def post(self, request, pk):
        data = validated(QrAttendanceSerializer, request)
        entry = IdentityService(get_store()).mark_qr_attendance(pk, data['qr_token'])
        return Response({"message": "Attendance recorded successfully via QR code!", "attendance": entry},
                        status=status.HTTP_201_CREATED)


class AdminProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def get(self, request):
        return Response(IdentityService(get_store()).admin_profile(caller_from(request)))

    def put(self, request):
        data = validated(AdminProfileSerializer, request)
        admin = IdentityService(get_store()).update_admin_profile(caller_from(request), **data)
        return Response({"message": "Profile updated successfully", "admin": admin})


class AdminPasswordView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def put(self, request):
        data = validated(PasswordChangeSerializer, request)
        IdentityService(get_store()).change_admin_password(
            caller_from(request), data.get('current_password'), data.get('new_password'),
        )
        return Response({"message": "Password updated successfully"})


class SettingsView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]
    serializer_class = None
    field = None
    label = None

    def put(self, request):
        data = validated(self.serializer_class, request)
        settings = IdentityService(get_store()).update_settings(caller_from(request), self.field, data)
        return Response({"message": f"{self.label} settings updated successfully", "settings": settings})


class NotificationSettingsView(SettingsView):
    serializer_class = NotificationSettingsSerializer
    field = 'notification_settings'
    label = 'Notification'


class SecuritySettingsView(SettingsView):
    serializer_class = SecuritySettingsSerializer
    field = 'security_settings'
    label = 'Security'


class AllProgressUpdatesView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def get(self, request):
        return Response(IdentityService(get_store()).all_progress_updates())


class ProgressFeedbackView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def post(self, request, update_id):
        data = validated(FeedbackSerializer, request)
        update = IdentityService(get_store()).add_progress_feedback(update_id, data['feedback'])
        return Response({"message": "Feedback added successfully", "update": update})
