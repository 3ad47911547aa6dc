from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from rest_framework.authtoken.views import obtain_auth_token
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

schema_view = get_schema_view(
    openapi.Info(
        title="Job Portal API",
        default_version='v1',
        description="API for the job registration and transfer portal",
    ),
    public=True,
)

urlpatterns = [
    path('', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('django-admin/', admin.site.urls),
    path('auth/login/', obtain_auth_token, name='auth_login'),
    path('catalog/', include('apps.catalog.urls')),
    path('registrations/', include('apps.registrations.urls')),
    path('transfers/', include('apps.transfers.urls')),
    path('announcements/', include('apps.announcements.urls')),
    path('management/', include('apps.management.urls')),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
