import shutil
import tempfile
from datetime import date
from decimal import Decimal
from unittest import mock

import requests
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from backend.exceptions import AlreadyReviewed, CreditsNotAllowed, OutOfScope

from .access import Operation, activity_filter, ensure_in_scope, is_in_scope, student_filter
from .file_views import guess_content_type, is_allowed_host
from .models import Activity
from .review import delete_user_cascade, plan_review, review_activity
from .validators import validate_avatar, validate_proof_document

User = get_user_model()

TEMP_MEDIA_ROOT = tempfile.mkdtemp()


class ActivityFixturesMixin:
    """Two students in different categories and the accounts that review them"""

    def create_fixtures(self):
        self.eng_student = User.objects.create_user(
            email='asha@example.com',
            password='StrongPass1!',
            name='Asha Rao',
            role='student',
            program_category='Engineering & Technology',
            program='B.Tech',
            specialization='Robotics & Automation',
            admission_year=2023,
            student_id='ENG001',
        )
        self.sci_student = User.objects.create_user(
            email='ben@example.com',
            password='StrongPass1!',
            name='Ben Thomas',
            role='student',
            program_category='Science',
            program='M.Sc',
            specialization='Physics',
            admission_year=2024,
            student_id='SCI001',
        )
        self.eng_faculty = User.objects.create_user(
            email='mehta@example.com',
            password='StrongPass1!',
            name='Dr Mehta',
            role='faculty',
            program_category='Engineering & Technology',
        )
        self.legacy_faculty = User.objects.create_user(
            email='legacy@example.com',
            password='StrongPass1!',
            name='Dr Legacy',
            role='faculty',
        )
        self.admin = User.objects.create_user(
            email='admin@example.com',
            password='StrongPass1!',
            name='Admin User',
            role='admin',
        )
        self.eng_activity = Activity.objects.create(
            student=self.eng_student,
            title='Robotics Workshop',
            type=Activity.Type.WORKSHOP,
            date=date(2024, 3, 1),
        )
        self.sci_activity = Activity.objects.create(
            student=self.sci_student,
            title='Physics Olympiad',
            type=Activity.Type.COMPETITION,
            date=date(2024, 4, 12),
        )

    def visible(self, user, operation=Operation.VIEW_ACTIVITIES):
        return set(Activity.objects.filter(activity_filter(user, operation)).values_list('pk', flat=True))


class AccessScopeTests(ActivityFixturesMixin, TestCase):
    """Test the view-all, approve-own scope policy"""

    def setUp(self):
        """Set up test data"""
        self.create_fixtures()

    def test_admin_sees_everything(self):
        self.assertEqual(self.visible(self.admin), {self.eng_activity.pk, self.sci_activity.pk})

    def test_superuser_without_admin_role_sees_everything(self):
        root = User.objects.create_superuser(email='root@example.com', password='StrongPass1!', role='student')
        self.assertEqual(self.visible(root), {self.eng_activity.pk, self.sci_activity.pk})

    def test_faculty_sees_own_category_only(self):
        self.assertEqual(self.visible(self.eng_faculty), {self.eng_activity.pk})

    def test_faculty_without_category_is_unrestricted(self):
        self.assertEqual(self.visible(self.legacy_faculty), {self.eng_activity.pk, self.sci_activity.pk})

    def test_faculty_category_without_students_sees_nothing(self):
        nursing = User.objects.create_user(
            email='nurse@example.com', name='Dr Nurse', role='faculty', program_category='Nursing'
        )
        self.assertEqual(self.visible(nursing), set())

    def test_student_sees_only_own_activities(self):
        self.assertEqual(self.visible(self.eng_student), {self.eng_activity.pk})
        self.assertEqual(self.visible(self.eng_student, Operation.APPROVE_ACTIVITY), set())

    def test_faculty_browses_every_student(self):
        students = User.objects.filter(student_filter(self.eng_faculty), role='student')
        self.assertEqual(set(students), {self.eng_student, self.sci_student})

    def test_faculty_approval_scope_on_students(self):
        students = User.objects.filter(
            student_filter(self.eng_faculty, Operation.APPROVE_ACTIVITY), role='student'
        )
        self.assertEqual(list(students), [self.eng_student])

    def test_is_in_scope(self):
        self.assertTrue(is_in_scope(self.eng_faculty, Operation.APPROVE_ACTIVITY, self.eng_student))
        self.assertFalse(is_in_scope(self.eng_faculty, Operation.APPROVE_ACTIVITY, self.sci_student))
        self.assertTrue(is_in_scope(self.eng_faculty, Operation.VIEW_STUDENTS, self.sci_student))
        self.assertTrue(is_in_scope(self.legacy_faculty, Operation.APPROVE_ACTIVITY, self.sci_student))
        self.assertTrue(is_in_scope(self.admin, 'approve-activity', self.sci_student))
        self.assertFalse(is_in_scope(self.eng_student, Operation.APPROVE_ACTIVITY, self.eng_student))
        self.assertFalse(is_in_scope(self.eng_student, Operation.VIEW_ACTIVITIES, self.sci_student))

    def test_non_student_owner_outside_faculty_scope(self):
        ops_admin = User.objects.create_user(
            email='ops@example.com', name='Ops Admin', role='admin', program_category='Engineering & Technology'
        )
        colleague = User.objects.create_user(
            email='rao@example.com', name='Dr Rao', role='faculty', program_category='Engineering & Technology'
        )
        owned = [
            Activity.objects.create(student=owner, title='Staff Seminar', type='conference', date=date(2024, 5, 2))
            for owner in (ops_admin, colleague)
        ]

        for owner in (ops_admin, colleague):
            self.assertFalse(is_in_scope(self.eng_faculty, Operation.APPROVE_ACTIVITY, owner))
            self.assertFalse(is_in_scope(self.eng_faculty, Operation.VIEW_ACTIVITIES, owner))
        self.assertEqual(self.visible(self.eng_faculty), {self.eng_activity.pk})
        self.assertEqual(
            self.visible(self.admin), {self.eng_activity.pk, self.sci_activity.pk} | {a.pk for a in owned}
        )

    def test_faculty_filter_is_a_lazy_subquery(self):
        with self.assertNumQueries(0):
            scope = activity_filter(self.eng_faculty, Operation.APPROVE_ACTIVITY)

        late = User.objects.create_user(
            email='late@example.com', name='Late Joiner', role='student',
            program_category='Engineering & Technology', student_id='ENG002',
        )
        activity = Activity.objects.create(student=late, title='Drone Lab', type='workshop', date=date(2024, 6, 1))

        with self.assertNumQueries(1):
            pks = set(Activity.objects.filter(scope).values_list('pk', flat=True))
        self.assertEqual(pks, {self.eng_activity.pk, activity.pk})

    def test_ensure_in_scope_raises(self):
        with self.assertRaises(OutOfScope) as ctx:
            ensure_in_scope(self.eng_faculty, Operation.APPROVE_ACTIVITY, self.sci_student)
        self.assertEqual(ctx.exception.context['operation'], 'approve-activity')

    def test_unknown_operation_rejected(self):
        with self.assertRaises(ValueError):
            activity_filter(self.admin, 'delete-everything')


class ReviewWorkflowTests(ActivityFixturesMixin, TestCase):
    """Test approve/reject transitions"""

    def setUp(self):
        """Set up test data"""
        self.create_fixtures()

    def test_approve_with_credits(self):
        activity = review_activity(self.eng_activity, self.eng_faculty, 'approved', remarks='Well done', credits=2.5)
        self.assertEqual(activity.status, Activity.Status.APPROVED)
        self.assertEqual(activity.approved_by, self.eng_faculty)
        self.assertEqual(activity.credits, Decimal('2.5'))
        self.assertEqual(activity.remarks, 'Well done')

    def test_reject_keeps_zero_credits(self):
        activity = review_activity(self.eng_activity, self.eng_faculty, 'rejected', remarks='')
        self.assertEqual(activity.status, Activity.Status.REJECTED)
        self.assertEqual(activity.credits, Decimal('0'))
        self.assertIsNone(activity.remarks)

    def test_out_of_scope_review_changes_nothing(self):
        with self.assertRaises(OutOfScope):
            review_activity(self.sci_activity, self.eng_faculty, 'approved', credits=3)
        self.sci_activity.refresh_from_db()
        self.assertEqual(self.sci_activity.status, Activity.Status.PENDING)
        self.assertIsNone(self.sci_activity.approved_by)

    def test_credits_with_rejection(self):
        with self.assertRaises(CreditsNotAllowed):
            plan_review(self.eng_activity, self.eng_faculty, 'rejected', credits=1)

    def test_scope_checked_before_credits(self):
        with self.assertRaises(OutOfScope):
            plan_review(self.sci_activity, self.eng_faculty, 'rejected', credits=1)

    def test_second_review_fails(self):
        review_activity(self.eng_activity, self.eng_faculty, 'approved')
        with self.assertRaises(AlreadyReviewed):
            review_activity(self.eng_activity, self.admin, 'rejected')

        self.eng_activity.refresh_from_db()
        self.assertEqual(self.eng_activity.status, Activity.Status.APPROVED)
        self.assertEqual(self.eng_activity.approved_by, self.eng_faculty)
        self.assertEqual(self.eng_activity.credits, Decimal('0'))
        self.assertIsNone(self.eng_activity.remarks)

    def test_stale_instance_loses_to_earlier_review(self):
        stale = Activity.objects.select_related('student').get(pk=self.eng_activity.pk)
        review_activity(self.eng_activity, self.admin, 'rejected')

        with self.assertRaises(AlreadyReviewed):
            review_activity(stale, self.eng_faculty, 'approved', credits=4)

        self.eng_activity.refresh_from_db()
        self.assertEqual(self.eng_activity.status, Activity.Status.REJECTED)
        self.assertEqual(self.eng_activity.approved_by, self.admin)

    def test_unsupported_decision(self):
        with self.assertRaises(ValueError):
            plan_review(self.eng_activity, self.eng_faculty, 'pending')

    def test_credits_out_of_range(self):
        with self.assertRaises(ValueError):
            plan_review(self.eng_activity, self.eng_faculty, 'approved', credits=11)


class DeleteUserCascadeTests(ActivityFixturesMixin, TestCase):

    def setUp(self):
        """Set up test data"""
        self.create_fixtures()

    def test_deleting_reviewer_detaches_and_annotates(self):
        review_activity(self.eng_activity, self.eng_faculty, 'approved', remarks='Great', credits=2)

        summary = delete_user_cascade(self.eng_faculty)

        self.assertEqual(summary, {'deletedActivities': 0, 'detachedReviews': 1})
        self.eng_activity.refresh_from_db()
        self.assertEqual(self.eng_activity.status, Activity.Status.APPROVED)
        self.assertIsNone(self.eng_activity.approved_by)
        self.assertEqual(
            self.eng_activity.remarks,
            'Great\nPreviously approved by Dr Mehta (deleted account)'
        )
        self.assertFalse(User.objects.filter(email='mehta@example.com').exists())

    def test_note_without_previous_remarks(self):
        review_activity(self.eng_activity, self.eng_faculty, 'rejected')
        delete_user_cascade(self.eng_faculty)
        self.eng_activity.refresh_from_db()
        self.assertEqual(self.eng_activity.remarks, 'Previously approved by Dr Mehta (deleted account)')

    def test_deleting_student_removes_their_activities(self):
        summary = delete_user_cascade(self.eng_student)
        self.assertEqual(summary['deletedActivities'], 1)
        self.assertFalse(Activity.objects.filter(pk=self.eng_activity.pk).exists())
        self.assertTrue(Activity.objects.filter(pk=self.sci_activity.pk).exists())

    def test_deleting_reviewer_of_several_students(self):
        reviewed = [self.eng_activity]
        for index in (2, 3):
            student = User.objects.create_user(
                email=f'eng{index}@example.com', name=f'Engineer {index}', role='student',
                program_category='Engineering & Technology', student_id=f'ENG00{index}',
            )
            reviewed.append(Activity.objects.create(
                student=student, title=f'Project {index}', type='workshop', date=date(2024, 3, index)
            ))
        for activity in reviewed:
            review_activity(activity, self.eng_faculty, 'approved', credits=1)
        own = Activity.objects.create(
            student=self.eng_faculty, title='Faculty Seminar', type='conference', date=date(2024, 3, 9)
        )

        summary = delete_user_cascade(self.eng_faculty)

        self.assertEqual(summary, {'deletedActivities': 1, 'detachedReviews': 3})
        self.assertFalse(Activity.objects.filter(pk=own.pk).exists())
        for activity in reviewed:
            activity.refresh_from_db()
            self.assertEqual(activity.status, Activity.Status.APPROVED)
            self.assertEqual(activity.credits, Decimal('1'))
            self.assertIsNone(activity.approved_by)
            self.assertEqual(activity.remarks, 'Previously approved by Dr Mehta (deleted account)')


class UploadValidatorTests(SimpleTestCase):

    def test_proof_document_extensions(self):
        validate_proof_document(SimpleUploadedFile('certificate.PDF', b'%PDF-1.4'))
        validate_proof_document(SimpleUploadedFile('letter.docx', b'PK'))
        with self.assertRaises(ValidationError):
            validate_proof_document(SimpleUploadedFile('payload.exe', b'MZ'))

    @override_settings(PROOF_DOCUMENT_MAX_BYTES=4)
    def test_proof_document_size(self):
        with self.assertRaises(ValidationError):
            validate_proof_document(SimpleUploadedFile('certificate.pdf', b'%PDF-1.4'))

    def test_avatar_rejects_non_images(self):
        validate_avatar(SimpleUploadedFile('me.png', b'png', content_type='image/png'))
        with self.assertRaises(ValidationError):
            validate_avatar(SimpleUploadedFile('me.gif', b'gif', content_type='image/gif'))
        with self.assertRaises(ValidationError):
            validate_avatar(SimpleUploadedFile('me.png', b'pdf', content_type='application/pdf'))

    @override_settings(AVATAR_MAX_BYTES=2)
    def test_avatar_size(self):
        with self.assertRaises(ValidationError):
            validate_avatar(SimpleUploadedFile('me.jpg', b'jpeg', content_type='image/jpeg'))


@override_settings(MEDIA_ROOT=TEMP_MEDIA_ROOT)
class StudentActivityAPITests(ActivityFixturesMixin, APITestCase):
    """Test the student activity endpoints"""

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(TEMP_MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        """Set up test data"""
        self.create_fixtures()
        self.client.force_authenticate(user=self.eng_student)

    def test_submit_activity_ignores_credits(self):
        response = self.client.post(reverse('my_activities'), {
            'title': 'Hackathon',
            'type': 'competition',
            'date': '2024-05-10',
            'organizer': 'IEEE',
            'credits': 9,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['activity']['status'], 'pending')
        activity = Activity.objects.get(pk=response.data['activity']['id'])
        self.assertEqual(activity.student, self.eng_student)
        self.assertEqual(activity.credits, Decimal('0'))

    def test_submit_activity_with_certificate(self):
        certificate = SimpleUploadedFile('cert.pdf', b'%PDF-1.4 test', content_type='application/pdf')
        response = self.client.post(reverse('my_activities'), {
            'title': 'Cloud Certification',
            'type': 'certification',
            'date': '2024-02-02',
            'certificate': certificate,
        }, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        activity = Activity.objects.get(pk=response.data['activity']['id'])
        self.assertTrue(activity.proof_document.name.startswith(f'certificates/{self.eng_student.pk}/'))

    def test_submit_rejects_bad_certificate(self):
        response = self.client.post(reverse('my_activities'), {
            'title': 'Cloud Certification',
            'type': 'certification',
            'date': '2024-02-02',
            'certificate': SimpleUploadedFile('cert.exe', b'MZ'),
        }, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('certificate', response.data)

    def test_submit_requires_title_and_type(self):
        response = self.client.post(reverse('my_activities'), {'title': 'AI', 'date': '2024-01-01'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('title', response.data)
        self.assertIn('type', response.data)

    def test_list_own_activities_with_filters(self):
        Activity.objects.create(
            student=self.eng_student,
            title='Coding Club',
            type=Activity.Type.CLUB_ACTIVITY,
            date=date(2024, 6, 1),
            status=Activity.Status.APPROVED,
        )

        response = self.client.get(reverse('my_activities'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['total'], 2)
        titles = {item['title'] for item in response.data['activities']}
        self.assertNotIn('Physics Olympiad', titles)

        response = self.client.get(reverse('my_activities'), {'status': 'approved'})
        self.assertEqual([item['title'] for item in response.data['activities']], ['Coding Club'])

        response = self.client.get(reverse('my_activities'), {'type': 'workshop'})
        self.assertEqual([item['title'] for item in response.data['activities']], ['Robotics Workshop'])

    def test_update_pending_activity(self):
        response = self.client.patch(
            reverse('my_activity_detail', args=[self.eng_activity.pk]),
            {'title': 'Advanced Robotics Workshop'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.eng_activity.refresh_from_db()
        self.assertEqual(self.eng_activity.title, 'Advanced Robotics Workshop')

    def test_reviewed_activity_is_frozen(self):
        review_activity(self.eng_activity, self.eng_faculty, 'approved')
        response = self.client.delete(reverse('my_activity_detail', args=[self.eng_activity.pk]))
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['code'], 'already_reviewed')
        self.assertTrue(Activity.objects.filter(pk=self.eng_activity.pk).exists())

    def test_cannot_touch_other_students_activity(self):
        response = self.client.delete(reverse('my_activity_detail', args=[self.sci_activity.pk]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_pending_activity(self):
        response = self.client.delete(reverse('my_activity_detail', args=[self.eng_activity.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Activity.objects.filter(pk=self.eng_activity.pk).exists())

    def test_stats_count_approved_credits_only(self):
        review_activity(self.eng_activity, self.eng_faculty, 'approved', credits=3)
        Activity.objects.create(
            student=self.eng_student,
            title='Pending talk',
            type=Activity.Type.CONFERENCE,
            date=date(2024, 7, 1),
            credits=Decimal('5'),
        )

        response = self.client.get(reverse('my_activity_stats'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalActivities'], 2)
        self.assertEqual(response.data['totalCredits'], 3.0)
        self.assertEqual(response.data['byStatus'], {'approved': 1, 'pending': 1})

    def test_faculty_cannot_use_student_endpoints(self):
        self.client.force_authenticate(user=self.eng_faculty)
        response = self.client.get(reverse('my_activities'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('my_activities'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class FacultyReviewAPITests(ActivityFixturesMixin, APITestCase):
    """Test the faculty review endpoints"""

    def setUp(self):
        """Set up test data"""
        self.create_fixtures()
        self.client.force_authenticate(user=self.eng_faculty)

    def test_pending_list_is_scoped(self):
        response = self.client.get(reverse('pending_activities'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item['id'] for item in response.data['activities']], [self.eng_activity.pk])
        self.assertEqual(response.data['activities'][0]['student']['programCategory'], 'Engineering & Technology')

    def test_admin_pending_list_is_unrestricted(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.get(reverse('pending_activities'))
        self.assertEqual(response.data['pagination']['total'], 2)

    def test_all_activities_status_filter(self):
        review_activity(self.eng_activity, self.eng_faculty, 'rejected')

        response = self.client.get(reverse('all_activities'), {'status': 'all'})
        self.assertEqual(response.data['pagination']['total'], 1)

        response = self.client.get(reverse('all_activities'), {'status': 'pending'})
        self.assertEqual(response.data['pagination']['total'], 0)

    def test_approve_in_scope(self):
        response = self.client.put(
            reverse('review_activity', args=[self.eng_activity.pk]),
            {'status': 'approved', 'remarks': 'Good work', 'credits': '2.5'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Activity approved successfully')
        self.assertEqual(response.data['activity']['approvedBy'], self.eng_faculty.pk)
        self.eng_activity.refresh_from_db()
        self.assertEqual(self.eng_activity.credits, Decimal('2.5'))

    def test_review_out_of_scope_forbidden(self):
        response = self.client.put(
            reverse('review_activity', args=[self.sci_activity.pk]),
            {'status': 'approved'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['code'], 'out_of_scope')

    def test_review_of_non_student_owner_forbidden(self):
        ops_admin = User.objects.create_user(
            email='ops@example.com', name='Ops Admin', role='admin', program_category='Engineering & Technology'
        )
        activity = Activity.objects.create(
            student=ops_admin, title='Staff Seminar', type='conference', date=date(2024, 5, 2)
        )

        response = self.client.put(
            reverse('review_activity', args=[activity.pk]),
            {'status': 'approved'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        activity.refresh_from_db()
        self.assertEqual(activity.status, Activity.Status.PENDING)
        self.assertIsNone(activity.approved_by)

    def test_review_twice_conflicts(self):
        url = reverse('review_activity', args=[self.eng_activity.pk])
        self.client.put(url, {'status': 'approved'}, format='json')
        response = self.client.put(url, {'status': 'rejected'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_reject_with_credits(self):
        response = self.client.put(
            reverse('review_activity', args=[self.eng_activity.pk]),
            {'status': 'rejected', 'credits': 1},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'credits_not_allowed')

    def test_review_rejects_out_of_range_credits(self):
        response = self.client.put(
            reverse('review_activity', args=[self.eng_activity.pk]),
            {'status': 'approved', 'credits': 12},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('credits', response.data)

    def test_review_requires_valid_status(self):
        response = self.client.put(
            reverse('review_activity', args=[self.eng_activity.pk]),
            {'status': 'pending'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_students_lists_everyone_with_approval_flag(self):
        response = self.client.get(reverse('faculty_students'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        flags = {item['email']: item['canApprove'] for item in response.data['students']}
        self.assertEqual(flags, {'asha@example.com': True, 'ben@example.com': False})

    def test_students_filter_by_category_key(self):
        response = self.client.get(reverse('faculty_students'), {'programCategory': 'SCIENCE'})
        self.assertEqual([item['name'] for item in response.data['students']], ['Ben Thomas'])
        self.assertEqual(response.data['students'][0]['pendingCount'], 1)

    def test_stats(self):
        review_activity(self.eng_activity, self.eng_faculty, 'approved', credits=1)
        response = self.client.get(reverse('faculty_stats'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalActivities'], 1)
        self.assertEqual(response.data['approvedCount'], 1)
        self.assertEqual(response.data['pendingCount'], 0)
        self.assertEqual(response.data['reviewedByMe'], 1)
        self.assertEqual(len(response.data['recentReviews']), 1)
        self.assertEqual(response.data['programCategory'], 'Engineering & Technology')

    def test_students_cannot_review(self):
        self.client.force_authenticate(user=self.eng_student)
        response = self.client.put(
            reverse('review_activity', args=[self.eng_activity.pk]),
            {'status': 'approved'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.eng_activity.refresh_from_db()
        self.assertTrue(self.eng_activity.is_pending)


@override_settings(REMOTE_PROOF_HOSTS=['res.cloudinary.com'])
class FileProxyTests(APITestCase):
    """Test the proof document proxy"""

    url = 'https://res.cloudinary.com/demo/raw/upload/v1/certificates/cert.pdf'

    def test_is_allowed_host(self):
        self.assertTrue(is_allowed_host(self.url))
        self.assertTrue(is_allowed_host('https://RES.cloudinary.com/x.png'))
        self.assertFalse(is_allowed_host('https://res.cloudinary.com.evil.example/x.pdf'))
        self.assertFalse(is_allowed_host('ftp://res.cloudinary.com/x.pdf'))
        self.assertFalse(is_allowed_host('not a url'))

    def test_guess_content_type(self):
        self.assertEqual(guess_content_type(self.url), 'application/pdf')
        self.assertEqual(
            guess_content_type('https://res.cloudinary.com/a/b.docx'),
            'application/vnd.openxmlformats-officedocument.wordprocessingml.document'
        )
        self.assertEqual(guess_content_type('https://res.cloudinary.com/a/blob'), 'application/octet-stream')

    def test_missing_url(self):
        response = self.client.get(reverse('view_file'))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_disallowed_host(self):
        response = self.client.get(reverse('view_file'), {'url': 'https://evil.example/cert.pdf'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @mock.patch('activities.file_views.requests.get')
    def test_streams_file_inline(self, mock_get):
        mock_get.return_value = mock.Mock(content=b'%PDF-1.4', headers={})
        response = self.client.get(reverse('view_file'), {'url': self.url})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.content, b'%PDF-1.4')
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertEqual(response['Content-Disposition'], 'inline; filename="cert.pdf"')
        mock_get.assert_called_once_with(self.url, timeout=30)

    @mock.patch('activities.file_views.requests.get')
    def test_forwards_upstream_status(self, mock_get):
        upstream = mock.Mock(status_code=404, reason='Not Found')
        mock_get.return_value.raise_for_status.side_effect = requests.HTTPError(response=upstream)

        response = self.client.get(reverse('view_file'), {'url': self.url})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    @mock.patch('activities.file_views.requests.get')
    def test_network_failure(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('connection refused')
        response = self.client.get(reverse('view_file'), {'url': self.url})
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertFalse(response.data['success'])
