# users/views.py
"""Admin user management and student profile endpoints"""

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import Count, Q, Sum
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from activities.access import Operation, student_filter
from activities.models import Activity
from activities.review import delete_user_cascade
from activities.validators import validate_avatar
from backend.pagination import ListPagination, paginate
from programs.validators import resolve_category_value

from .permissions import IsAdmin, IsStudentOrAdmin
from .serializers import AdminUserSerializer, StudentProfileSerializer, UserSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


def _category_filter(value):
    return resolve_category_value(value) or value


# ---------------------------------------------------------------------------
# Admin: user management
# ---------------------------------------------------------------------------

@api_view(['GET', 'POST'])
@permission_classes([IsAdmin])
def users_list(request):
    """
    GET: list accounts, filterable by search, role and programCategory
    POST: create an account of any role
    """
    if request.method == 'POST':
        serializer = AdminUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"Admin {request.user.email} created {user.role} account {user.email}")
        return Response({
            'success': True,
            'message': 'User created successfully',
            'user': UserSerializer(user, context={'request': request}).data,
        }, status=status.HTTP_201_CREATED)

    queryset = User.objects.all()

    search = request.query_params.get('search')
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) | Q(email__icontains=search) | Q(student_id__icontains=search)
        )

    role = request.query_params.get('role')
    if role and role != 'all':
        queryset = queryset.filter(role=role)

    category = request.query_params.get('programCategory')
    if category and category != 'all':
        queryset = queryset.filter(program_category=_category_filter(category))

    return paginate(request, queryset.order_by('-created_at'), UserSerializer, 'users')


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdmin])
def user_detail(request, user_id):
    user = get_object_or_404(User, pk=user_id)

    if request.method == 'DELETE':
        if user.pk == request.user.pk:
            return Response({
                'success': False,
                'message': 'Cannot delete your own account'
            }, status=status.HTTP_400_BAD_REQUEST)
        if user.is_admin_user():
            return Response({
                'success': False,
                'message': 'Cannot delete admin accounts'
            }, status=status.HTTP_400_BAD_REQUEST)

        summary = delete_user_cascade(user)
        return Response({
            'success': True,
            'message': 'User deleted successfully',
            'data': summary,
        })

    serializer = AdminUserSerializer(user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    if user.pk == request.user.pk and serializer.validated_data.get('is_active') is False:
        return Response({
            'success': False,
            'message': 'Cannot deactivate your own account'
        }, status=status.HTTP_400_BAD_REQUEST)

    if user.is_admin_user() and serializer.validated_data.get('is_active') is False:
        return Response({
            'success': False,
            'message': 'Cannot deactivate admin accounts'
        }, status=status.HTTP_400_BAD_REQUEST)

    user = serializer.save()
    logger.info(f"Admin {request.user.email} updated account {user.email}")
    return Response({
        'success': True,
        'message': 'User updated successfully',
        'user': UserSerializer(user, context={'request': request}).data,
    })


@api_view(['POST'])
@permission_classes([IsAdmin])
def toggle_user_status(request, user_id):
    user = get_object_or_404(User, pk=user_id)

    if user.is_active and user.pk == request.user.pk:
        return Response({
            'success': False,
            'message': 'Cannot deactivate your own account'
        }, status=status.HTTP_400_BAD_REQUEST)
    if user.is_active and user.is_admin_user():
        return Response({
            'success': False,
            'message': 'Cannot deactivate admin accounts'
        }, status=status.HTTP_400_BAD_REQUEST)

    user.is_active = not user.is_active
    user.save(update_fields=['is_active', 'updated_at'])

    state = 'activated' if user.is_active else 'deactivated'
    logger.info(f"Admin {request.user.email} {state} account {user.email}")
    return Response({
        'success': True,
        'message': f'User {state} successfully',
        'isActive': user.is_active,
    })


# ---------------------------------------------------------------------------
# Student: profile
# ---------------------------------------------------------------------------

@api_view(['GET', 'PUT', 'PATCH'])
@permission_classes([IsStudentOrAdmin])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def student_profile(request):
    if request.method == 'GET':
        serializer = StudentProfileSerializer(request.user, context={'request': request})
        return Response({
            'success': True,
            'profile': serializer.data,
        })

    serializer = StudentProfileSerializer(
        request.user, data=request.data, partial=True, context={'request': request}
    )
    serializer.is_valid(raise_exception=True)
    serializer.save()
    logger.info(f"Profile updated for {request.user.email}")
    return Response({
        'success': True,
        'message': 'Profile updated successfully',
        'profile': serializer.data,
    })


@api_view(['POST'])
@permission_classes([IsStudentOrAdmin])
@parser_classes([MultiPartParser, FormParser])
def upload_avatar(request):
    avatar = request.FILES.get('avatar')
    if avatar is None:
        return Response({
            'success': False,
            'message': 'No file uploaded'
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        validate_avatar(avatar)
    except DjangoValidationError as e:
        raise ValidationError({'avatar': e.messages})

    user = request.user
    if user.profile_picture:
        user.profile_picture.delete(save=False)
    user.profile_picture = avatar
    user.save(update_fields=['profile_picture', 'updated_at'])

    return Response({
        'success': True,
        'message': 'Profile picture updated',
        'profilePicture': request.build_absolute_uri(user.profile_picture.url),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def browse_students(request):
    """Public portfolio listing of active students with approved activity totals"""
    queryset = User.objects.filter(
        student_filter(request.user, Operation.VIEW_STUDENTS),
        role='student',
        is_active=True,
    ).annotate(
        approved_count=Count('activities', filter=Q(activities__status=Activity.Status.APPROVED)),
        approved_credits=Sum('activities__credits', filter=Q(activities__status=Activity.Status.APPROVED)),
    ).order_by('name')

    search = request.query_params.get('search')
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) | Q(skills__icontains=search) | Q(program__icontains=search)
        )

    category = request.query_params.get('programCategory')
    if category and category != 'all':
        queryset = queryset.filter(program_category=_category_filter(category))

    paginator = ListPagination(results_key='students')
    page = paginator.paginate_queryset(queryset, request)

    students = []
    for student in page:
        students.append({
            'id': student.pk,
            'name': student.name,
            'programCategory': student.program_category,
            'program': student.program,
            'specialization': student.specialization,
            'programDisplay': student.program_display,
            'admissionYear': student.admission_year,
            'profilePicture': (
                request.build_absolute_uri(student.profile_picture.url) if student.profile_picture else None
            ),
            'skills': student.skills,
            'languages': student.languages,
            'achievements': student.achievements,
            'projects': student.projects,
            'certifications': student.certifications,
            'linkedinUrl': student.linkedin_url,
            'githubUrl': student.github_url,
            'portfolioUrl': student.portfolio_url,
            'approvedActivities': student.approved_count,
            'totalCredits': float(student.approved_credits or 0),
        })

    return paginator.get_paginated_response(students)
