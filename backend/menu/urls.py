from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import MenuItemViewSet

router = DefaultRouter()
router.register(r'items', MenuItemViewSet, basename='menu-item')

urlpatterns = [
    path('', include(router.urls)),
]
