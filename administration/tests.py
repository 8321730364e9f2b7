import csv
import io
from datetime import date, datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from activities.models import Activity

from .admin_dashboard import CSV_HEADER, AdminDashboardService, ReportFilterError

User = get_user_model()


class DashboardFixturesMixin:

    def create_fixtures(self):
        self.admin = User.objects.create_user(email='admin@example.com', name='Admin User', role='admin')
        self.faculty = User.objects.create_user(
            email='mehta@example.com', name='Dr Mehta', role='faculty', program_category='Science'
        )
        self.asha = User.objects.create_user(
            email='asha@example.com', name='Asha Rao', role='student',
            program_category='Engineering & Technology', program='B.Tech',
            specialization='Robotics & Automation', admission_year=2023, student_id='ENG001',
        )
        self.ben = User.objects.create_user(
            email='ben@example.com', name='Ben Thomas', role='student',
            program_category='Science', program='M.Sc', specialization='Physics',
            admission_year=2024, student_id='SCI001',
        )
        self.idle = User.objects.create_user(
            email='idle@example.com', name='Idle Student', role='student',
            program_category='Science', student_id='SCI002',
        )

        self.workshop = self.add_activity(self.asha, 'Robotics Workshop', 'workshop', 'approved', '2.5',
                                          created=datetime(2024, 3, 1, 10, 0))
        self.talk = self.add_activity(self.asha, 'Tech Talk', 'conference', 'pending', '0',
                                      created=datetime(2024, 4, 15, 10, 0))
        self.olympiad = self.add_activity(self.ben, 'Physics Olympiad', 'competition', 'approved', '4',
                                          created=datetime(2024, 5, 20, 10, 0))
        self.rejected = self.add_activity(self.ben, 'Unverified Course', 'online_course', 'rejected', '0',
                                          created=datetime(2024, 5, 21, 10, 0))

    def add_activity(self, student, title, activity_type, activity_status, credits, created):
        activity = Activity.objects.create(
            student=student,
            title=title,
            type=activity_type,
            date=created.date(),
            status=activity_status,
            credits=Decimal(credits),
            organizer='University',
            description=f'{title}, "quoted" detail',
        )
        # created_at is auto-populated; move it for date range filtering
        Activity.objects.filter(pk=activity.pk).update(
            created_at=timezone.make_aware(created, timezone.get_current_timezone())
        )
        activity.refresh_from_db()
        return activity


class AdminDashboardServiceTests(DashboardFixturesMixin, TestCase):
    """Test dashboard aggregation and report building"""

    def setUp(self):
        """Set up test data"""
        self.create_fixtures()
        self.service = AdminDashboardService()

    def test_stats(self):
        stats = self.service.get_stats()

        self.assertEqual(stats['userStats'], {
            'totalUsers': 5, 'studentCount': 3, 'facultyCount': 1, 'adminCount': 1,
        })
        self.assertEqual(stats['activityStats'], {
            'totalActivities': 4, 'pendingActivities': 1, 'approvedActivities': 2, 'rejectedActivities': 1,
        })
        self.assertEqual(stats['programCategoryStats'], [
            {'programCategory': 'Science', 'count': 2},
            {'programCategory': 'Engineering & Technology', 'count': 1},
        ])
        self.assertEqual(len(stats['activityTypeStats']), 4)

    def test_top_students_ranked_by_credits(self):
        top = self.service.get_top_students()
        self.assertEqual([student['name'] for student in top], ['Ben Thomas', 'Asha Rao'])
        self.assertEqual(top[0]['totalCredits'], 4.0)
        self.assertEqual(top[0]['activityCount'], 2)
        self.assertEqual(top[1]['totalCredits'], 2.5)
        self.assertEqual(top[1]['program'], 'B.Tech - Robotics & Automation')

    def test_top_students_tie_broken_by_activity_count(self):
        self.add_activity(self.ben, 'Extra', 'workshop', 'approved', '0', created=datetime(2024, 6, 1))
        self.add_activity(self.asha, 'Hackathon', 'competition', 'approved', '1.5', created=datetime(2024, 6, 2))
        self.add_activity(self.asha, 'Seminar', 'conference', 'pending', '0', created=datetime(2024, 6, 3))

        top = self.service.get_top_students()
        self.assertEqual(top[0]['totalCredits'], top[1]['totalCredits'])
        self.assertEqual(top[0]['name'], 'Asha Rao')

    def test_report_summary(self):
        report = self.service.build_report()
        summary = report['summary']
        self.assertEqual(summary['totalActivities'], 4)
        self.assertEqual(summary['totalApprovedActivities'], 2)
        self.assertEqual(summary['totalCredits'], 6.5)
        self.assertEqual(summary['statusBreakdown'], {'approved': 2, 'pending': 1, 'rejected': 1})
        self.assertEqual(summary['programCategoryBreakdown'], {'Science': 2, 'Engineering & Technology': 2})
        self.assertEqual(report['activities'][0]['title'], 'Unverified Course')

    def test_report_date_range_inclusive(self):
        report = self.service.build_report(start_date='2024-04-15', end_date='2024-05-20')
        self.assertEqual(
            {row['title'] for row in report['activities']},
            {'Tech Talk', 'Physics Olympiad'}
        )
        self.assertEqual(report['summary']['dateRange'], {'start': '2024-04-15', 'end': '2024-05-20'})

    def test_report_status_filter(self):
        report = self.service.build_report(status_filter='approved')
        self.assertEqual(report['summary']['totalActivities'], 2)

    def test_report_rejects_bad_date(self):
        with self.assertRaises(ReportFilterError):
            self.service.build_report(start_date='15/04/2024')

    def test_csv_rendering(self):
        text = self.service.render_csv(self.service.build_report(status_filter='approved'))
        self.assertTrue(text.startswith("\ufeff"))

        rows = list(csv.reader(io.StringIO(text[1:])))
        self.assertEqual(rows[0], CSV_HEADER)
        self.assertEqual(len(rows), 3)
        olympiad = rows[1]
        self.assertEqual(olympiad[0], 'Ben Thomas')
        self.assertEqual(olympiad[3], 'M.Sc - Physics')
        self.assertEqual(olympiad[8], '4.0')
        self.assertEqual(olympiad[12], 'Physics Olympiad, "quoted" detail')

    def test_report_filename(self):
        self.assertEqual(AdminDashboardService.report_filename(date(2024, 5, 1)), 'activity-report-2024-05-01.csv')


class AdminDashboardAPITests(DashboardFixturesMixin, APITestCase):
    """Test the admin stats and report endpoints"""

    def setUp(self):
        """Set up test data"""
        self.create_fixtures()
        self.client.force_authenticate(user=self.admin)

    def test_stats_endpoint(self):
        response = self.client.get(reverse('admin_stats'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['userStats']['studentCount'], 3)
        self.assertEqual(len(response.data['topStudents']), 2)

    def test_json_report(self):
        response = self.client.get(reverse('admin_reports'), {'status': 'pending'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['title'] for row in response.data['activities']], ['Tech Talk'])

    def test_csv_report(self):
        response = self.client.get(reverse('admin_reports'), {'format': 'csv'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response['Content-Type'].startswith('text/csv'))
        self.assertRegex(
            response['Content-Disposition'],
            r'^attachment; filename="activity-report-\d{4}-\d{2}-\d{2}\.csv"$'
        )
        self.assertTrue(response.content.startswith(b'\xef\xbb\xbf'))
        self.assertEqual(response.content.decode('utf-8-sig').count('\n'), 5)

    def test_bad_date_is_client_error(self):
        response = self.client.get(reverse('admin_reports'), {'startDate': 'yesterday'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

    def test_faculty_forbidden(self):
        self.client.force_authenticate(user=self.faculty)
        self.assertEqual(self.client.get(reverse('admin_stats')).status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(self.client.get(reverse('admin_reports')).status_code, status.HTTP_403_FORBIDDEN)
