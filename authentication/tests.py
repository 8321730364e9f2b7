from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

User = get_user_model()


class RegistrationTests(APITestCase):
    """Test self-registration"""

    def setUp(self):
        """Set up test data"""
        cache.clear()
        self.url = reverse('register')
        self.payload = {
            'name': 'Asha Rao',
            'email': 'asha@example.com',
            'password': 'Str0ng!pass',
            'role': 'student',
            'programCategory': 'ENGINEERING',
            'program': 'B.Tech',
            'specialization': 'Computer Science & Engineering',
            'admissionYear': 2023,
            'studentId': 'ENG23001',
        }

    def test_register_student(self):
        response = self.client.post(self.url, self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user_data = response.data['data']['user']
        self.assertEqual(user_data['programCategory'], 'Engineering & Technology')
        self.assertEqual(user_data['role'], 'student')
        tokens = response.data['data']['tokens']
        self.assertEqual(tokens['token_type'], 'Bearer')
        self.assertTrue(tokens['access_token'])
        self.assertTrue(tokens['refresh_token'])

        user = User.objects.get(email='asha@example.com')
        self.assertTrue(user.check_password('Str0ng!pass'))
        self.assertEqual(user.student_id, 'ENG23001')

    def test_register_faculty(self):
        response = self.client.post(self.url, {
            'name': 'Dr Mehta',
            'email': 'mehta@example.com',
            'password': 'Str0ng!pass',
            'role': 'faculty',
            'programCategory': 'Science',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        faculty = User.objects.get(email='mehta@example.com')
        self.assertEqual(faculty.role, 'faculty')
        self.assertIsNone(faculty.student_id)

    def test_duplicate_email_conflicts(self):
        self.client.post(self.url, self.payload, format='json')
        payload = dict(self.payload, email='ASHA@example.com', studentId='ENG23002')
        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_duplicate_student_id_conflicts(self):
        self.client.post(self.url, self.payload, format='json')
        payload = dict(self.payload, email='other@example.com')
        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['message'], 'Student ID already exists')

    def test_weak_password(self):
        response = self.client.post(self.url, dict(self.payload, password='password'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)

    def test_student_requires_student_id(self):
        payload = dict(self.payload)
        del payload['studentId']
        response = self.client.post(self.url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('studentId', response.data)

    def test_faculty_requires_category(self):
        response = self.client.post(self.url, {
            'name': 'Dr Mehta',
            'email': 'mehta@example.com',
            'password': 'Str0ng!pass',
            'role': 'faculty',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'missing_mandatory_field')

    def test_unknown_category(self):
        response = self.client.post(self.url, dict(self.payload, programCategory='Astrology'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'unresolved_category')
        self.assertFalse(User.objects.filter(email='asha@example.com').exists())

    def test_cannot_self_register_as_admin(self):
        response = self.client.post(self.url, dict(self.payload, role='admin'), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class LoginTests(APITestCase):
    """Test login, token refresh and profile"""

    def setUp(self):
        """Set up test data"""
        cache.clear()
        self.user = User.objects.create_user(
            email='mehta@example.com',
            password='Str0ng!pass',
            name='Dr Mehta',
            role='faculty',
            program_category='Science',
        )

    def login(self, email='mehta@example.com', password='Str0ng!pass'):
        return self.client.post(reverse('login'), {'email': email, 'password': password}, format='json')

    def test_login_success(self):
        response = self.login(email='MEHTA@example.com')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['user']['email'], 'mehta@example.com')
        self.user.refresh_from_db()
        self.assertIsNotNone(self.user.last_login)

    def test_login_wrong_password(self):
        response = self.login(password='wrong-password')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Invalid email or password')

    def test_login_unknown_user(self):
        response = self.login(email='nobody@example.com')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_login_deactivated(self):
        self.user.is_active = False
        self.user.save()
        response = self.login()
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Account is deactivated')

    def test_login_missing_fields(self):
        response = self.client.post(reverse('login'), {'email': 'mehta@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_access_token_authenticates(self):
        tokens = self.login().data['data']['tokens']
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access_token']}")
        response = self.client.get(reverse('profile'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['user']['programCategory'], 'Science')

    def test_refresh_token(self):
        tokens = self.login().data['data']['tokens']
        response = self.client.post(reverse('token_refresh'), {'refresh': tokens['refresh_token']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_profile_requires_authentication(self):
        response = self.client.get(reverse('profile'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


@override_settings(ADMIN_RESET_CODE='reset-code-123')
class AdminPasswordResetTests(APITestCase):
    """Test the guarded admin credential reset"""

    def setUp(self):
        """Set up test data"""
        cache.clear()
        self.url = reverse('admin_password_reset')

    def reset(self, **overrides):
        payload = {
            'confirmCode': 'reset-code-123',
            'newUsername': 'root@example.com',
            'newPassword': 'NewAdmin1!',
        }
        payload.update(overrides)
        return self.client.post(self.url, payload, format='json')

    def test_creates_then_updates_admin(self):
        response = self.reset()
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['username'], 'root@example.com')

        response = self.reset(newUsername='boss@example.com', newPassword='Another1!')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        admins = User.objects.admins()
        self.assertEqual(admins.count(), 1)
        self.assertEqual(admins.get().email, 'boss@example.com')
        self.assertTrue(admins.get().check_password('Another1!'))

    def test_wrong_code(self):
        response = self.reset(confirmCode='guess')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(User.objects.admins().exists())

    def test_missing_fields(self):
        response = self.client.post(self.url, {'confirmCode': 'reset-code-123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_short_password(self):
        response = self.reset(newPassword='short')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(ADMIN_RESET_CODE='')
    def test_not_configured(self):
        response = self.reset()
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def test_reset_admin_can_log_in(self):
        self.reset()
        response = self.client.post(
            reverse('login'), {'email': 'root@example.com', 'password': 'NewAdmin1!'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['user']['role'], 'admin')

    def test_email_of_another_account_conflicts(self):
        self.reset()
        student = User.objects.create_user(email='taken@example.com', name='Asha Rao', role='student',
                                           student_id='ENG001', password='Str0ng!pass')

        response = self.reset(newUsername='TAKEN@example.com', newPassword='Another1!')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(response.data['success'])
        self.assertEqual(User.objects.admins().get().email, 'root@example.com')
        student.refresh_from_db()
        self.assertEqual(student.role, 'student')
        self.assertTrue(student.check_password('Str0ng!pass'))

    def test_email_conflict_when_no_admin_exists(self):
        User.objects.create_user(email='taken@example.com', name='Dr Mehta', role='faculty',
                                 program_category='Science')

        response = self.reset(newUsername='taken@example.com')

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(User.objects.admins().exists())

    def test_admin_may_keep_own_email(self):
        self.reset()
        response = self.reset(newPassword='Another1!')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
