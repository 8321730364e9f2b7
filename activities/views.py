# activities/views.py
"""Student-side activity endpoints"""

import logging

from django.db.models import Count, Sum
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from backend.exceptions import AlreadyReviewed
from backend.pagination import paginate
from users.permissions import IsStudentOrAdmin

from .access import Operation, activity_filter
from .models import Activity
from .serializers import ActivitySerializer, ActivitySubmissionSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsStudentOrAdmin])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def my_activities(request):
    """
    GET: list own activities, filterable by status and type
    POST: submit a new activity with an optional certificate file
    """
    if request.method == 'POST':
        serializer = ActivitySubmissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        activity = serializer.save(student=request.user)
        logger.info(f"Activity {activity.pk} submitted by {request.user.email}")
        return Response({
            'success': True,
            'message': 'Activity submitted successfully',
            'activity': ActivitySerializer(activity, context={'request': request}).data,
        }, status=status.HTTP_201_CREATED)

    queryset = Activity.objects.filter(
        activity_filter(request.user, Operation.VIEW_ACTIVITIES),
        student=request.user,
    ).select_related('student', 'approved_by')

    status_filter = request.query_params.get('status')
    if status_filter:
        queryset = queryset.filter(status=status_filter)
    type_filter = request.query_params.get('type')
    if type_filter:
        queryset = queryset.filter(type=type_filter)

    return paginate(request, queryset.order_by('-created_at'), ActivitySerializer, 'activities')


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsStudentOrAdmin])
@parser_classes([MultiPartParser, FormParser, JSONParser])
def my_activity_detail(request, activity_id):
    """Edit or withdraw an own activity while it is still pending"""
    activity = get_object_or_404(Activity, pk=activity_id, student=request.user)

    if not activity.is_pending:
        raise AlreadyReviewed(
            f"Activity has already been {activity.status} and can no longer be changed",
            activity=activity.pk,
            status=activity.status,
        )

    if request.method == 'DELETE':
        activity.delete()
        logger.info(f"Activity {activity_id} withdrawn by {request.user.email}")
        return Response({
            'success': True,
            'message': 'Activity deleted successfully',
        })

    serializer = ActivitySubmissionSerializer(activity, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    activity = serializer.save()
    return Response({
        'success': True,
        'message': 'Activity updated successfully',
        'activity': ActivitySerializer(activity, context={'request': request}).data,
    })


@api_view(['GET'])
@permission_classes([IsStudentOrAdmin])
def my_activity_stats(request):
    """Activity totals for the logged in student; credits count approved activities only"""
    activities = Activity.objects.filter(student=request.user)

    by_status = {
        row['status']: row['count']
        for row in activities.values('status').annotate(count=Count('id')).order_by()
    }
    total_credits = activities.filter(
        status=Activity.Status.APPROVED
    ).aggregate(total=Sum('credits'))['total'] or 0

    return Response({
        'success': True,
        'totalActivities': activities.count(),
        'totalCredits': float(total_credits),
        'byStatus': by_status,
    })
