from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from . import views

urlpatterns = [
    path('', views.index, name='index'),
    path('health/', views.health, name='health'),
    path('admin/', admin.site.urls),
    path('api/verify-token/', views.verify_token, name='verify-token'),
    path('api/student/', include('accounts.urls')),
    path('api/admin/', include('accounts.admin_urls')),
    path('api/admin/', include('projects.urls')),
    path('api/interns/', include('interns.urls')),
]

# Media files serve during development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
