"""
JWT authentication endpoints for the activity hub.

Tokens are issued with djangorestframework-simplejwt; registration and login
return the same ``{tokens, user}`` payload so clients can store both at once.
"""

import logging
from typing import Any, Dict

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from django.utils.crypto import constant_time_compare
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework_simplejwt.tokens import RefreshToken

from users.serializers import RegistrationSerializer, UserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


class AuthRateThrottle(AnonRateThrottle):
    """Throttle for the credential endpoints, keyed on client address"""
    scope = 'auth'


def generate_tokens(user) -> Dict[str, Any]:
    """Issue an access/refresh pair for ``user``"""
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    access = refresh.access_token
    return {
        'access_token': str(access),
        'refresh_token': str(refresh),
        'access_expires_in': settings.SIMPLE_JWT['ACCESS_TOKEN_LIFETIME'].total_seconds(),
        'token_type': 'Bearer',
    }


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def register(request):
    """
    Student or faculty self-registration

    Expected payload:
    {
        "name": "Asha Rao",
        "email": "asha@example.com",
        "password": "Str0ng!pass",
        "role": "student",
        "programCategory": "ENGINEERING",
        "program": "B.Tech",
        "specialization": "Computer Science & Engineering",
        "admissionYear": 2023,
        "studentId": "ENG23001"
    }
    """
    email = (request.data.get('email') or '').strip()
    if email and User.objects.filter(email__iexact=email).exists():
        return Response({
            'success': False,
            'message': 'User with this email already exists'
        }, status=status.HTTP_409_CONFLICT)

    student_id = request.data.get('studentId')
    if student_id and User.objects.filter(student_id=student_id).exists():
        return Response({
            'success': False,
            'message': 'Student ID already exists'
        }, status=status.HTTP_409_CONFLICT)

    serializer = RegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    with transaction.atomic():
        user = serializer.save()

    logger.info(f"Registered {user.role} {user.email} ({user.program_category})")

    return Response({
        'success': True,
        'message': 'Registration successful',
        'data': {
            'user': UserSerializer(user, context={'request': request}).data,
            'tokens': generate_tokens(user),
        }
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def login(request):
    """
    User login endpoint

    Expected payload:
    {
        "email": "user@example.com",
        "password": "password123"
    }
    """
    email = request.data.get('email')
    password = request.data.get('password')

    if not email or not password:
        return Response({
            'success': False,
            'message': 'Email and password are required'
        }, status=status.HTTP_400_BAD_REQUEST)

    user = User.objects.filter(email__iexact=email).first()
    if user is None or not user.check_password(password):
        logger.warning(f"Failed login for {email}")
        return Response({
            'success': False,
            'message': 'Invalid email or password'
        }, status=status.HTTP_401_UNAUTHORIZED)

    if not user.is_active:
        logger.warning(f"Login attempt on deactivated account {email}")
        return Response({
            'success': False,
            'message': 'Account is deactivated'
        }, status=status.HTTP_401_UNAUTHORIZED)

    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])

    tokens = generate_tokens(user)
    logger.info(f"Login: {user.email} ({user.role})")

    return Response({
        'success': True,
        'message': 'Login successful',
        'data': {
            'user': UserSerializer(user, context={'request': request}).data,
            'tokens': tokens,
        }
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def profile(request):
    """Return the current user's record, freshly loaded"""
    user = User.objects.get(pk=request.user.pk)
    return Response({
        'success': True,
        'data': {
            'user': UserSerializer(user, context={'request': request}).data,
        }
    })


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def admin_password_reset(request):
    """
    Create or update the admin account, guarded by the ADMIN_RESET_CODE secret

    Expected payload:
    {
        "confirmCode": "...",
        "newUsername": "admin@example.com",
        "newPassword": "..."
    }
    """
    confirm_code = request.data.get('confirmCode')
    new_email = request.data.get('newUsername')
    new_password = request.data.get('newPassword')

    if not confirm_code or not new_email or not new_password:
        return Response({
            'success': False,
            'message': 'Missing required fields: confirmCode, newUsername, newPassword'
        }, status=status.HTTP_400_BAD_REQUEST)

    if not settings.ADMIN_RESET_CODE:
        logger.error("Admin reset requested but ADMIN_RESET_CODE is not configured")
        return Response({
            'success': False,
            'message': 'Admin reset code not configured on server'
        }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if not constant_time_compare(confirm_code, settings.ADMIN_RESET_CODE):
        logger.warning("Failed admin reset attempt with an invalid confirmation code")
        return Response({
            'success': False,
            'message': 'Invalid confirmation code'
        }, status=status.HTTP_403_FORBIDDEN)

    if len(new_password) < 8:
        return Response({
            'success': False,
            'message': 'Password must be at least 8 characters long'
        }, status=status.HTTP_400_BAD_REQUEST)

    email = User.objects.normalize_email(new_email)

    with transaction.atomic():
        admin = User.objects.admins().order_by('created_at').first()
        created = admin is None
        others = User.objects.filter(email__iexact=email)
        if not created:
            others = others.exclude(pk=admin.pk)
        if others.exists():
            logger.warning(f"Admin reset refused: {email} belongs to another account")
            return Response({
                'success': False,
                'message': 'Email is already used by another account'
            }, status=status.HTTP_409_CONFLICT)

        if created:
            admin = User(role=User.Role.ADMIN, is_staff=True)
        admin.email = email
        admin.name = 'Admin User'
        admin.department = 'Administration'
        admin.is_active = True
        admin.set_password(new_password)
        admin.save()

    logger.info(f"Admin credentials {'created' if created else 'updated'}: {admin.email}")
    return Response({
        'success': True,
        'message': f"Admin {'user created' if created else 'credentials updated'} successfully",
        'username': admin.email,
    }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)
