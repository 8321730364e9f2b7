# users/tests.py
import shutil
import tempfile
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

from django.contrib.auth import get_user_model
from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from activities.models import Activity

from .permissions import IsAdmin, IsFaculty, IsFacultyOrAdmin, IsStudent, IsStudentOrAdmin

User = get_user_model()

TEMP_MEDIA_ROOT = tempfile.mkdtemp()


def make_student(email='asha@example.com', student_id='ENG001', **extra):
    fields = {
        'name': 'Asha Rao',
        'role': 'student',
        'program_category': 'Engineering & Technology',
        'program': 'B.Tech',
        'specialization': 'Robotics & Automation',
        'admission_year': 2023,
        'student_id': student_id,
    }
    fields.update(extra)
    return User.objects.create_user(email=email, password='StrongPass1!', **fields)


class UserModelTests(TestCase):
    """Test User model functionality"""

    def test_create_user(self):
        """Test creating a regular user"""
        user = User.objects.create_user(email='Test@Example.com', password='testpass123')
        self.assertEqual(user.email, 'Test@example.com')
        self.assertEqual(user.name, 'Test')
        self.assertEqual(user.role, 'student')
        self.assertTrue(user.check_password('testpass123'))
        self.assertFalse(user.is_admin_user())

    def test_create_superuser(self):
        """Test creating a super user"""
        root = User.objects.create_superuser(email='root@example.com', password='rootpass123')
        self.assertTrue(root.is_superuser)
        self.assertTrue(root.is_staff)
        self.assertEqual(root.role, 'admin')
        self.assertTrue(root.is_admin_user())

    def test_create_user_requires_email(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email='', password='testpass123')

    def test_str_and_program_display(self):
        student = make_student()
        self.assertEqual(str(student), 'Asha Rao (Student)')
        self.assertEqual(student.program_display, 'B.Tech - Robotics & Automation')
        self.assertTrue(student.is_student())
        self.assertFalse(student.is_faculty())

    def test_role_managers(self):
        make_student()
        User.objects.create_user(email='f@example.com', role='faculty', program_category='Science')
        User.objects.create_user(email='a@example.com', role='admin')
        self.assertEqual(User.objects.students().count(), 1)
        self.assertEqual(User.objects.faculty().count(), 1)
        self.assertEqual(User.objects.admins().count(), 1)


class RolePermissionTests(TestCase):
    """Test role gates"""

    def setUp(self):
        """Set up test data"""
        self.student = make_student()
        self.faculty = User.objects.create_user(email='f@example.com', role='faculty', program_category='Science')
        self.admin = User.objects.create_user(email='a@example.com', role='admin')

    def allowed(self, permission_class, user):
        return permission_class().has_permission(SimpleNamespace(user=user), None)

    def test_role_matrix(self):
        self.assertTrue(self.allowed(IsStudent, self.student))
        self.assertFalse(self.allowed(IsStudent, self.admin))
        self.assertTrue(self.allowed(IsStudentOrAdmin, self.admin))
        self.assertFalse(self.allowed(IsStudentOrAdmin, self.faculty))
        self.assertTrue(self.allowed(IsFaculty, self.faculty))
        self.assertTrue(self.allowed(IsFacultyOrAdmin, self.admin))
        self.assertFalse(self.allowed(IsFacultyOrAdmin, self.student))
        self.assertTrue(self.allowed(IsAdmin, self.admin))
        self.assertFalse(self.allowed(IsAdmin, self.faculty))

    def test_inactive_user_denied(self):
        self.admin.is_active = False
        self.assertFalse(self.allowed(IsAdmin, self.admin))

    def test_superuser_passes_every_gate(self):
        root = User.objects.create_superuser(email='root@example.com', password='rootpass123', role='student')
        self.assertTrue(self.allowed(IsFaculty, root))
        self.assertTrue(self.allowed(IsAdmin, root))


class CreateAdminCommandTests(TestCase):

    def test_creates_then_updates(self):
        call_command('create_admin', email='boss@example.com', password='AdminPass1!', name='Boss')
        admin = User.objects.get(email='boss@example.com')
        self.assertTrue(admin.is_superuser)
        self.assertEqual(admin.role, 'admin')

        call_command('create_admin', email='boss@example.com', password='OtherPass1!')
        self.assertEqual(User.objects.filter(email='boss@example.com').count(), 1)
        admin.refresh_from_db()
        self.assertTrue(admin.check_password('OtherPass1!'))

    def test_short_password(self):
        with self.assertRaises(CommandError):
            call_command('create_admin', email='boss@example.com', password='short')


class AdminUserManagementAPITests(APITestCase):
    """Test admin user management endpoints"""

    def setUp(self):
        """Set up test data"""
        self.admin = User.objects.create_user(
            email='admin@example.com', password='AdminPass1!', name='Admin User', role='admin'
        )
        self.student = make_student()
        self.faculty = User.objects.create_user(
            email='mehta@example.com', password='StrongPass1!', name='Dr Mehta',
            role='faculty', program_category='Science'
        )
        self.client.force_authenticate(user=self.admin)

    def student_payload(self, **overrides):
        payload = {
            'name': 'Kiran Das',
            'email': 'kiran@example.com',
            'password': 'StrongPass1!',
            'role': 'student',
            'programCategory': 'ENGINEERING',
            'program': 'B.Tech',
            'specialization': 'CSE - Data Science',
            'admissionYear': 2024,
            'studentId': 'ENG777',
        }
        payload.update(overrides)
        return payload

    def test_list_users_with_filters(self):
        response = self.client.get(reverse('admin_users'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['total'], 3)

        response = self.client.get(reverse('admin_users'), {'role': 'faculty'})
        self.assertEqual([user['email'] for user in response.data['users']], ['mehta@example.com'])

        response = self.client.get(reverse('admin_users'), {'programCategory': 'ENGINEERING', 'role': 'all'})
        self.assertEqual([user['email'] for user in response.data['users']], ['asha@example.com'])

        response = self.client.get(reverse('admin_users'), {'search': 'eng001'})
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_pagination_limit(self):
        response = self.client.get(reverse('admin_users'), {'limit': 2, 'page': 2})
        self.assertEqual(len(response.data['users']), 1)
        self.assertEqual(response.data['pagination'], {'total': 3, 'page': 2, 'pages': 2, 'hasMore': False})

    def test_create_student_normalizes_category(self):
        response = self.client.post(reverse('admin_users'), self.student_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['programCategory'], 'Engineering & Technology')
        created = User.objects.get(email='kiran@example.com')
        self.assertEqual(created.program_category, 'Engineering & Technology')
        self.assertTrue(created.check_password('StrongPass1!'))

    def test_create_student_missing_specialization(self):
        response = self.client.post(
            reverse('admin_users'), self.student_payload(specialization=''), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'missing_mandatory_field')
        self.assertEqual(response.data['details'], {'field': 'specialization'})

    def test_create_student_invalid_program(self):
        response = self.client.post(
            reverse('admin_users'), self.student_payload(program='MBA', specialization='Finance'), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'invalid_program_selection')
        self.assertFalse(User.objects.filter(email='kiran@example.com').exists())

    def test_create_duplicate_email(self):
        response = self.client.post(
            reverse('admin_users'), self.student_payload(email='ASHA@example.com'), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_create_faculty_drops_student_fields(self):
        response = self.client.post(reverse('admin_users'), {
            'name': 'Dr Iyer',
            'email': 'iyer@example.com',
            'password': 'StrongPass1!',
            'role': 'faculty',
            'programCategory': 'Nursing',
            'admissionYear': 2020,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        faculty = User.objects.get(email='iyer@example.com')
        self.assertEqual(faculty.program_category, 'Nursing')
        self.assertIsNone(faculty.admission_year)

    def test_partial_update(self):
        response = self.client.patch(
            reverse('admin_user_detail', args=[self.student.pk]), {'name': 'Asha R.'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.student.refresh_from_db()
        self.assertEqual(self.student.name, 'Asha R.')
        self.assertEqual(self.student.specialization, 'Robotics & Automation')

    def test_update_rejects_program_change_outside_category(self):
        response = self.client.patch(
            reverse('admin_user_detail', args=[self.student.pk]), {'program': 'MBA'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.student.refresh_from_db()
        self.assertEqual(self.student.program, 'B.Tech')

    def test_cannot_deactivate_self(self):
        response = self.client.patch(
            reverse('admin_user_detail', args=[self.admin.pk]), {'isActive': False}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.is_active)

    def test_cannot_deactivate_other_admin(self):
        other_admin = User.objects.create_user(email='second@example.com', role='admin')
        url = reverse('admin_user_detail', args=[other_admin.pk])

        response = self.client.put(url, {'isActive': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Cannot deactivate admin accounts')
        other_admin.refresh_from_db()
        self.assertTrue(other_admin.is_active)

        response = self.client.patch(url, {'department': 'Registry'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_delete_protections(self):
        response = self.client.delete(reverse('admin_user_detail', args=[self.admin.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        other_admin = User.objects.create_user(email='second@example.com', role='admin')
        response = self.client.delete(reverse('admin_user_detail', args=[other_admin.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=other_admin.pk).exists())

    def test_delete_student_cascades(self):
        Activity.objects.create(student=self.student, title='Seminar', type='conference', date=date(2024, 1, 5))
        response = self.client.delete(reverse('admin_user_detail', args=[self.student.pk]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], {'deletedActivities': 1, 'detachedReviews': 0})
        self.assertFalse(User.objects.filter(pk=self.student.pk).exists())

    def test_toggle_status(self):
        url = reverse('admin_toggle_user_status', args=[self.student.pk])
        response = self.client.post(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['isActive'])

        response = self.client.post(url)
        self.assertTrue(response.data['isActive'])
        self.assertEqual(response.data['message'], 'User activated successfully')

    def test_toggle_admin_refused(self):
        response = self.client.post(reverse('admin_toggle_user_status', args=[self.admin.pk]))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_non_admin_forbidden(self):
        self.client.force_authenticate(user=self.faculty)
        response = self.client.get(reverse('admin_users'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


@override_settings(MEDIA_ROOT=TEMP_MEDIA_ROOT)
class StudentProfileAPITests(APITestCase):
    """Test student profile, avatar upload and the portfolio listing"""

    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(TEMP_MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()

    def setUp(self):
        """Set up test data"""
        self.student = make_student(skills='Python, ROS')
        self.client.force_authenticate(user=self.student)

    def test_get_profile(self):
        response = self.client.get(reverse('student_profile'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['profile']['programCategory'], 'Engineering & Technology')
        self.assertEqual(response.data['profile']['skills'], 'Python, ROS')

    def test_update_profile_blanks_become_null(self):
        response = self.client.patch(reverse('student_profile'), {
            'skills': '',
            'githubUrl': 'https://github.com/asha',
            'program': 'MBA',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.student.refresh_from_db()
        self.assertIsNone(self.student.skills)
        self.assertEqual(self.student.github_url, 'https://github.com/asha')
        self.assertEqual(self.student.program, 'B.Tech')

    def test_faculty_has_no_student_profile(self):
        faculty = User.objects.create_user(email='f@example.com', role='faculty', program_category='Science')
        self.client.force_authenticate(user=faculty)
        response = self.client.get(reverse('student_profile'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_upload_avatar(self):
        avatar = SimpleUploadedFile('me.png', b'\x89PNG\r\n', content_type='image/png')
        response = self.client.post(reverse('upload_avatar'), {'avatar': avatar}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['profilePicture'].startswith('http://testserver/media/profiles/'))
        self.student.refresh_from_db()
        self.assertTrue(self.student.profile_picture)

    def test_upload_avatar_missing_file(self):
        response = self.client.post(reverse('upload_avatar'), {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_upload_avatar_rejects_pdf(self):
        document = SimpleUploadedFile('me.pdf', b'%PDF-1.4', content_type='application/pdf')
        response = self.client.post(reverse('upload_avatar'), {'avatar': document}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('avatar', response.data)

    def test_browse_students(self):
        classmate = make_student(email='ben@example.com', student_id='SCI001', name='Ben Thomas',
                                 program_category='Science', program='M.Sc', specialization='Physics')
        make_student(email='gone@example.com', student_id='OLD001', name='Gone Student', is_active=False)
        Activity.objects.create(
            student=self.student, title='Robotics Cup', type='competition', date=date(2024, 2, 1),
            status=Activity.Status.APPROVED, credits=Decimal('2.5')
        )
        Activity.objects.create(
            student=self.student, title='Pending Talk', type='conference', date=date(2024, 3, 1),
            credits=Decimal('4')
        )

        faculty = User.objects.create_user(email='f@example.com', role='faculty', program_category='Science')
        self.client.force_authenticate(user=faculty)
        response = self.client.get(reverse('browse_students'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        by_name = {entry['name']: entry for entry in response.data['students']}
        self.assertEqual(set(by_name), {'Asha Rao', 'Ben Thomas'})
        self.assertEqual(by_name['Asha Rao']['approvedActivities'], 1)
        self.assertEqual(by_name['Asha Rao']['totalCredits'], 2.5)
        self.assertEqual(by_name['Ben Thomas']['totalCredits'], 0.0)
        self.assertEqual(by_name['Ben Thomas']['programDisplay'], 'M.Sc - Physics')

        response = self.client.get(reverse('browse_students'), {'programCategory': 'SCIENCE'})
        self.assertEqual([entry['id'] for entry in response.data['students']], [classmate.pk])
