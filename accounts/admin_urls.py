from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    AdminPasswordView,
    AdminProfileView,
    AllProgressUpdatesView,
    NotificationSettingsView,
    PendingRegistrationViewSet,
    ProgressFeedbackView,
    SecuritySettingsView,
    StudentQrAttendanceView,
    StudentViewSet,
)

router = DefaultRouter()
router.register(r'students', StudentViewSet, basename='students')
router.register(r'pending', PendingRegistrationViewSet, basename='pending')

urlpatterns = [
    path('', include(router.urls)),
    path('profile/', AdminProfileView.as_view(), name='admin-profile'),
    path('password/', AdminPasswordView.as_view(), name='admin-password'),
    path('settings/notifications/', NotificationSettingsView.as_view(), name='admin-notification-settings'),
    path('settings/security/', SecuritySettingsView.as_view(), name='admin-security-settings'),
    path('progress-updates/', AllProgressUpdatesView.as_view(), name='admin-progress-updates'),
    path('progress-updates/<str:update_id>/feedback/', ProgressFeedbackView.as_view(), name='admin-progress-feedback'),
    path('attendance/qr/<str:pk>/', StudentQrAttendanceView.as_view(), name='student-qr-attendance'),
]
