from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'admin', views.AnnouncementViewSet, basename='admin-announcements')

urlpatterns = [
    path('', views.ActiveAnnouncementListView.as_view(), name='active_announcements'),
    path('', include(router.urls)),
]
