# activities/faculty_views.py
"""
Faculty review endpoints.

Every listing goes through the access scope policy: faculty see and review
activities of students in their own program category, admins see all.
"""

import logging

from django.contrib.auth import get_user_model
from django.db.models import Count, Q
from django.shortcuts import get_object_or_404
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from backend.pagination import ListPagination, paginate
from programs.validators import resolve_category_value
from users.permissions import IsFacultyOrAdmin

from .access import Operation, activity_filter, is_in_scope, student_filter
from .models import Activity
from .review import review_activity
from .serializers import ActivitySerializer, ActivityStudentSerializer, ReviewSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


def scoped_activities(user):
    return Activity.objects.filter(
        activity_filter(user, Operation.VIEW_ACTIVITIES)
    ).select_related('student', 'approved_by')


@api_view(['GET'])
@permission_classes([IsFacultyOrAdmin])
def faculty_stats(request):
    """Status totals within scope plus the caller's own review history"""
    activities = scoped_activities(request.user)
    counts = activities.aggregate(
        total=Count('id'),
        pending=Count('id', filter=Q(status=Activity.Status.PENDING)),
        approved=Count('id', filter=Q(status=Activity.Status.APPROVED)),
        rejected=Count('id', filter=Q(status=Activity.Status.REJECTED)),
    )

    my_reviews = Activity.objects.filter(approved_by=request.user).select_related('student', 'approved_by')
    recent_reviews = my_reviews.order_by('-updated_at')[:5]

    return Response({
        'success': True,
        'totalActivities': counts['total'],
        'pendingCount': counts['pending'],
        'approvedCount': counts['approved'],
        'rejectedCount': counts['rejected'],
        'reviewedByMe': my_reviews.count(),
        'recentReviews': ActivitySerializer(recent_reviews, many=True, context={'request': request}).data,
        'programCategory': request.user.program_category,
    })


@api_view(['GET'])
@permission_classes([IsFacultyOrAdmin])
def pending_activities(request):
    queryset = scoped_activities(request.user).filter(
        status=Activity.Status.PENDING
    ).order_by('-created_at')
    return paginate(request, queryset, ActivitySerializer, 'activities')


@api_view(['GET'])
@permission_classes([IsFacultyOrAdmin])
def all_activities(request):
    """All activities in scope, most recently updated first; ``status=all`` disables the filter"""
    queryset = scoped_activities(request.user)

    status_filter = request.query_params.get('status')
    if status_filter and status_filter != 'all':
        queryset = queryset.filter(status=status_filter)

    return paginate(request, queryset.order_by('-updated_at'), ActivitySerializer, 'activities')


@api_view(['PUT'])
@permission_classes([IsFacultyOrAdmin])
def review(request, activity_id):
    """Approve or reject a pending activity"""
    activity = get_object_or_404(Activity.objects.select_related('student'), pk=activity_id)

    serializer = ReviewSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    decision = serializer.validated_data['status']

    activity = review_activity(
        activity,
        request.user,
        decision,
        remarks=serializer.validated_data.get('remarks'),
        credits=serializer.validated_data.get('credits'),
    )

    return Response({
        'success': True,
        'message': f'Activity {decision} successfully',
        'activity': ActivitySerializer(activity, context={'request': request}).data,
    })


@api_view(['GET'])
@permission_classes([IsFacultyOrAdmin])
def students(request):
    """
    Every active student with activity counts, flagged with whether the
    caller may review that student's activities.
    """
    queryset = User.objects.filter(
        student_filter(request.user, Operation.VIEW_STUDENTS),
        role='student',
        is_active=True,
    ).annotate(
        activity_count=Count('activities'),
        pending_count=Count('activities', filter=Q(activities__status=Activity.Status.PENDING)),
    ).order_by('name')

    search = request.query_params.get('search')
    if search:
        queryset = queryset.filter(
            Q(name__icontains=search) | Q(email__icontains=search) | Q(student_id__icontains=search)
        )

    category = request.query_params.get('programCategory')
    if category:
        queryset = queryset.filter(program_category=resolve_category_value(category) or category)

    paginator = ListPagination(results_key='students')
    page = paginator.paginate_queryset(queryset, request)

    data = []
    for student in page:
        entry = ActivityStudentSerializer(student).data
        entry['activityCount'] = student.activity_count
        entry['pendingCount'] = student.pending_count
        entry['canApprove'] = is_in_scope(request.user, Operation.APPROVE_ACTIVITY, student)
        data.append(entry)

    return paginator.get_paginated_response(data)
