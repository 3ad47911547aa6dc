from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'admin', views.RegistrationViewSet, basename='admin-registrations')

urlpatterns = [
    path('', views.RegistrationCreateView.as_view(), name='registration_create'),
    path('lookup/', views.RegistrationLookupView.as_view(), name='registration_lookup'),
    path('', include(router.urls)),
]
