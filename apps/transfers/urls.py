from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'admin/requests', views.TransferRequestAdminViewSet, basename='admin-transfer-requests')

urlpatterns = [
    path('registrations/<int:registration_id>/', views.TransferSubmitView.as_view(), name='transfer_submit'),
    path('registrations/<int:registration_id>/pending/', views.PendingTransferView.as_view(), name='transfer_pending'),
    path('registrations/<int:registration_id>/eligible-programs/', views.EligibleProgramsView.as_view(), name='transfer_eligible_programs'),
    path('', include(router.urls)),
]
