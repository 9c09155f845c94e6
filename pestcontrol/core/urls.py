from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .views import (
    AdminTokenObtainPairView, user_me,
    display_settings, activity_list,
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', AdminTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # Settings endpoints
    path('settings/display/', display_settings, name='display-settings'),

    # Activity endpoints
    path('activities/', activity_list, name='activity-list'),
]
