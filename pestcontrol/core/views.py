from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from .models import Activity
from .serializers import UserSerializer, DisplaySettingsSerializer, ActivitySerializer
from .utils import get_display_settings, save_display_settings


class AdminTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        # Only the configured admin account may use the admin panel
        if not (self.user.is_staff or self.user.is_superuser):
            raise AuthenticationFailed('This account cannot access the admin panel.')
        data['user'] = UserSerializer(self.user).data
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        return token


class AdminTokenObtainPairView(TokenObtainPairView):
    serializer_class = AdminTokenObtainPairSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current admin user"""
    return Response(UserSerializer(request.user).data)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def display_settings(request):
    """Company/panel display settings"""
    if request.method == 'GET':
        return Response(get_display_settings())
    serializer = DisplaySettingsSerializer(data=request.data, partial=True)
    if serializer.is_valid():
        return Response(save_display_settings(serializer.validated_data))
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def activity_list(request):
    """Recent activity, newest first"""
    activities = Activity.objects.all()
    activity_type = request.query_params.get('type', None)
    if activity_type:
        activities = activities.filter(type=activity_type)
    limit = request.query_params.get('limit', None)
    if limit and limit.isdigit():
        activities = activities[:int(limit)]
    serializer = ActivitySerializer(activities, many=True)
    return Response(serializer.data)
