from django.urls import path

from projects.views import ProjectProgressView, StudentProjectView

from .views import (
    LoginView,
    OwnProfileView,
    ProgressUpdatesView,
    RegisterView,
    StudentProfileView,
    UploadView,
)

urlpatterns = [
    path('register/', RegisterView.as_view(), name='student-register'),
    path('login/', LoginView.as_view(), name='student-login'),
    path('profile/', OwnProfileView.as_view(), name='student-own-profile'),
    path('profile/<str:pk>/', StudentProfileView.as_view(), name='student-profile'),
    path('projects/<str:project_id>/', StudentProjectView.as_view(), name='student-project'),
    path('progress/<str:project_id>/', ProjectProgressView.as_view(), name='student-project-progress'),
    path('progress-updates/', ProgressUpdatesView.as_view(), name='student-progress-updates'),
    path('uploads/<str:kind>/', UploadView.as_view(), name='student-upload'),
]
