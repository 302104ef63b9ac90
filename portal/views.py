from django.conf import settings
from rest_framework import permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from accounts.permissions import caller_from
from portal.dates import now


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def index(request):
    return Response({"message": "Internship portal API is running", "status": "ok"})


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
def health(request):
    return Response({
        "status": "ok",
        "store": settings.PORTAL_STORE['BACKEND'],
        "time": now(),
    })


@api_view(['GET'])
def verify_token(request):
    """Echo the identity carried by a valid token."""
    caller = caller_from(request)
    return Response({
        "valid": True,
        "user": dict(caller, name=request.auth.get('name')),
    })
