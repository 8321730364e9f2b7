"""
Admin dashboard statistics and activity reports.

Aggregates users and activities for the admin dashboard and produces the
activity report, either as JSON or as a spreadsheet-friendly CSV download.
"""

import csv
import io
import logging
from collections import Counter
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.contrib.auth import get_user_model
from django.db.models import Count, DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.http import HttpResponse
from django.utils import timezone
from django.utils.dateparse import parse_date
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from activities.models import Activity
from programs.catalog import format_program_display
from users.permissions import IsAdmin

logger = logging.getLogger(__name__)

User = get_user_model()

CSV_HEADER = [
    'Student Name', 'Student ID', 'Program Category', 'Program', 'Admission Year',
    'Activity Title', 'Type', 'Date', 'Credits', 'Organizer', 'Status',
    'Created Date', 'Description',
]

TOP_STUDENTS_LIMIT = 10


class ReportFilterError(ValueError):
    """Report query parameters could not be parsed"""


def _credits(value) -> float:
    return round(float(value or 0), 1)


class AdminDashboardService:
    """
    Service for generating admin dashboard analytics and reports
    """

    def get_stats(self) -> Dict[str, Any]:
        """User and activity totals, breakdowns and the top students by credits"""
        users = User.objects.aggregate(
            totalUsers=Count('id'),
            studentCount=Count('id', filter=Q(role=User.Role.STUDENT)),
            facultyCount=Count('id', filter=Q(role=User.Role.FACULTY)),
            adminCount=Count('id', filter=Q(role=User.Role.ADMIN)),
        )
        activities = Activity.objects.aggregate(
            totalActivities=Count('id'),
            pendingActivities=Count('id', filter=Q(status=Activity.Status.PENDING)),
            approvedActivities=Count('id', filter=Q(status=Activity.Status.APPROVED)),
            rejectedActivities=Count('id', filter=Q(status=Activity.Status.REJECTED)),
        )

        category_stats = (
            User.objects.filter(role=User.Role.STUDENT, program_category__isnull=False)
            .values('program_category')
            .annotate(count=Count('id'))
            .order_by('-count', 'program_category')
        )
        type_stats = (
            Activity.objects.values('type')
            .annotate(count=Count('id'))
            .order_by('-count', 'type')
        )

        return {
            'userStats': users,
            'activityStats': activities,
            'programCategoryStats': [
                {'programCategory': row['program_category'], 'count': row['count']}
                for row in category_stats
            ],
            'activityTypeStats': [
                {'type': row['type'], 'count': row['count']}
                for row in type_stats
            ],
            'topStudents': self.get_top_students(),
        }

    def get_top_students(self, limit: int = TOP_STUDENTS_LIMIT) -> List[Dict[str, Any]]:
        """
        Students ranked by approved credits, ties broken by activity count.
        Students with neither activities nor credits are left out.
        """
        students = (
            User.objects.filter(role=User.Role.STUDENT)
            .annotate(
                total_credits=Coalesce(
                    Sum('activities__credits', filter=Q(activities__status=Activity.Status.APPROVED)),
                    Value(Decimal('0')),
                    output_field=DecimalField(max_digits=8, decimal_places=1),
                ),
                activity_count=Count('activities'),
            )
            .filter(Q(activity_count__gt=0) | Q(total_credits__gt=0))
            .order_by('-total_credits', '-activity_count', 'name')[:limit]
        )

        return [
            {
                'id': student.pk,
                'name': student.name or 'Unknown',
                'studentId': student.student_id or 'N/A',
                'programCategory': student.program_category or 'Unknown',
                'program': format_program_display(student.program, student.specialization),
                'totalCredits': _credits(student.total_credits),
                'activityCount': student.activity_count,
            }
            for student in students
        ]

    def build_report(self, start_date: Optional[str] = None, end_date: Optional[str] = None,
                     status_filter: str = 'all') -> Dict[str, Any]:
        """
        Activity report over an optional creation-date range (both ends inclusive).

        Raises:
            ReportFilterError: a date is not in YYYY-MM-DD form
        """
        activities = Activity.objects.select_related('student').order_by('-created_at')

        start = self._parse_date(start_date, 'startDate')
        end = self._parse_date(end_date, 'endDate')
        if start:
            activities = activities.filter(created_at__date__gte=start)
        if end:
            activities = activities.filter(created_at__date__lte=end)
        if status_filter and status_filter != 'all':
            activities = activities.filter(status=status_filter)

        activities = list(activities)
        approved = [activity for activity in activities if activity.status == Activity.Status.APPROVED]

        summary = {
            'totalActivities': len(activities),
            'totalApprovedActivities': len(approved),
            'totalCredits': _credits(sum((activity.credits for activity in approved), Decimal('0'))),
            'statusBreakdown': dict(Counter(activity.status for activity in activities)),
            'programCategoryBreakdown': dict(Counter(
                activity.student.program_category or 'Unknown' for activity in activities
            )),
            'activityTypeBreakdown': dict(Counter(activity.type for activity in activities)),
            'dateRange': {
                'start': start_date,
                'end': end_date,
            },
        }

        return {
            'summary': summary,
            'activities': [self._report_row(activity) for activity in activities],
        }

    def render_csv(self, report: Dict[str, Any]) -> str:
        """Render report rows as CSV text prefixed with a UTF-8 byte order mark"""
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator='\n')
        writer.writerow(CSV_HEADER)
        for row in report['activities']:
            student = row['student']
            writer.writerow([
                student['name'] or '',
                student['studentId'] or '',
                student['programCategory'] or '',
                student['program'] or '',
                student['admissionYear'] or '',
                row['title'],
                row['type'],
                row['date'],
                row['credits'],
                row['organizer'] or '',
                row['status'],
                row['createdAt'],
                row['description'] or '',
            ])
        return '\ufeff' + buffer.getvalue()

    @staticmethod
    def report_filename(today: Optional[date] = None) -> str:
        today = today or timezone.localdate()
        return f"activity-report-{today.isoformat()}.csv"

    @staticmethod
    def _parse_date(value: Optional[str], field: str) -> Optional[date]:
        if not value:
            return None
        try:
            parsed = parse_date(value)
        except ValueError:
            parsed = None
        if parsed is None:
            raise ReportFilterError(f"{field} must be a date in YYYY-MM-DD format")
        return parsed

    @staticmethod
    def _report_row(activity: Activity) -> Dict[str, Any]:
        student = activity.student
        return {
            'id': activity.pk,
            'title': activity.title,
            'type': activity.type,
            'date': activity.date.isoformat(),
            'credits': _credits(activity.credits),
            'organizer': activity.organizer,
            'description': activity.description,
            'status': activity.status,
            'createdAt': activity.created_at.isoformat(),
            'student': {
                'name': student.name,
                'studentId': student.student_id,
                'programCategory': student.program_category,
                'program': format_program_display(student.program, student.specialization),
                'admissionYear': student.admission_year,
            },
        }


# Global dashboard service instance
admin_dashboard_service = AdminDashboardService()


# API Endpoints
@api_view(['GET'])
@permission_classes([IsAdmin])
def get_admin_stats(request):
    """Dashboard statistics"""
    stats = admin_dashboard_service.get_stats()
    return Response({
        'success': True,
        **stats,
    })


@api_view(['GET'])
@permission_classes([IsAdmin])
def get_reports(request):
    """
    Activity report

    Query parameters: startDate, endDate (YYYY-MM-DD), status (default all),
    format (json or csv)
    """
    params = request.query_params
    try:
        report = admin_dashboard_service.build_report(
            start_date=params.get('startDate'),
            end_date=params.get('endDate'),
            status_filter=params.get('status', 'all'),
        )
    except ReportFilterError as e:
        return Response({
            'success': False,
            'message': str(e)
        }, status=status.HTTP_400_BAD_REQUEST)

    logger.info(
        f"Report generated by {request.user.email}: {report['summary']['totalActivities']} activities"
    )

    if params.get('format') == 'csv':
        response = HttpResponse(
            admin_dashboard_service.render_csv(report),
            content_type='text/csv; charset=utf-8',
        )
        response['Content-Disposition'] = (
            f'attachment; filename="{admin_dashboard_service.report_filename()}"'
        )
        return response

    return Response({
        'success': True,
        **report,
    })
