from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'logs', views.ManagementLogViewSet, basename='management-logs')

urlpatterns = [
    path('', include(router.urls)),
]
