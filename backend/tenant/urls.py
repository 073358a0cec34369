from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import RestaurantPublicView, TableViewSet

router = DefaultRouter()
router.register(r'tables', TableViewSet, basename='table')

urlpatterns = [
    path('restaurants/<slug:slug>/', RestaurantPublicView.as_view(), name='restaurant-public'),
    path('', include(router.urls)),
]
