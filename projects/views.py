from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.permissions import IsAdminRole, caller_from
from attendance.serializers import ContentSerializer
from portal.serializers import validated
from storage import get_store

from .serializers import ProjectCreateSerializer, ProjectFeedbackSerializer, ProjectUpdateSerializer
from .services import ProjectService


class ProjectViewSet(viewsets.ViewSet):
    """Admin management of projects."""
    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    def list(self, request):
        return Response(ProjectService(get_store()).list_projects())

    def create(self, request):
        project = ProjectService(get_store()).create(
            created_by=request.auth.get('name') or 'admin', **validated(ProjectCreateSerializer, request),
        )
        return Response({"message": "Project created successfully", "project": project},
                        status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return Response(ProjectService(get_store()).get_project(pk))

    def update(self, request, pk=None):
        project = ProjectService(get_store()).update(pk, **validated(ProjectUpdateSerializer, request))
        return Response({"message": "Project updated successfully", "project": project})

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        ProjectService(get_store()).delete(pk)
        return Response({"message": "Project deleted successfully"})

    @action(detail=True, methods=['post'])
    def feedback(self, request, pk=None):
        data = validated(ProjectFeedbackSerializer, request)
        project = ProjectService(get_store()).add_feedback(pk, data['feedback'], data.get('student_id'))
        return Response({"message": "Feedback added successfully", "project": project})


class StudentProjectView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, project_id):
        return Response(ProjectService(get_store()).get_project_for(project_id, caller_from(request)))


class ProjectProgressView(APIView):
    """A student reports progress on one of their projects."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, project_id):
        data = validated(ContentSerializer, request)
        update = ProjectService(get_store()).submit_progress(caller_from(request)['id'], project_id, data['content'])
        return Response({"message": "Progress update submitted successfully", "update": update},
                        status=status.HTTP_201_CREATED)
