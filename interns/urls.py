from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import InternViewSet, PastInternDetailView, PastInternListView

# the interns collection is the root of this prefix, so no api-root view
router = SimpleRouter()
router.register(r'', InternViewSet, basename='interns')

urlpatterns = [
    path('past/', PastInternListView.as_view(), name='past-interns'),
    path('past/<str:pk>/', PastInternDetailView.as_view(), name='past-intern-detail'),
    path('', include(router.urls)),
]
