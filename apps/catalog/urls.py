from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'admin/categories', views.CategoryViewSet, basename='admin-categories')
router.register(r'admin/sub-categories', views.SubCategoryViewSet, basename='admin-sub-categories')
router.register(r'admin/programs', views.ProgramViewSet, basename='admin-programs')

urlpatterns = [
    path('categories/', views.PublicCategoryListView.as_view(), name='public_categories'),
    path('categories/selectable/', views.SelectableCategoryListView.as_view(), name='selectable_categories'),
    path('categories/<int:pk>/programs/', views.CategoryProgramListView.as_view(), name='category_programs'),
    path('', include(router.urls)),
]
