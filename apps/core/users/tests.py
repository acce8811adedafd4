from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings

from apps.core.colleges.models import College

from .services import create_auth_user, get_auth_provisioner


def fake_provisioner(**kwargs):
    return {'success': True}


class CreateAuthUserTests(TestCase):
    def setUp(self):
        self.user_model = get_user_model()
        self.college = College.objects.create(name='Auth College', code='auth_college')

    def test_creates_student_login_with_email_as_username(self):
        result = create_auth_user(
            email='New.Student@Example.com',
            password='Temp-pass-2026',
            role='student',
            college_id=self.college.id,
            name='Ann Marie Lee',
        )

        self.assertTrue(result['success'])
        user = self.user_model.objects.get(username='new.student@example.com')
        self.assertEqual(user.role, 'student')
        self.assertEqual(user.college, self.college)
        self.assertEqual(user.first_name, 'Ann')
        self.assertEqual(user.last_name, 'Marie Lee')
        self.assertTrue(user.check_password('Temp-pass-2026'))

    def test_duplicate_email_is_reported_not_raised(self):
        create_auth_user(email='dup@example.com', password='pass12345', role='student', college_id=self.college.id)
        result = create_auth_user(email='DUP@example.com', password='pass12345', role='student', college_id=self.college.id)

        self.assertFalse(result['success'])
        self.assertIn('already exists', result['error'])
        self.assertEqual(self.user_model.objects.filter(email='dup@example.com').count(), 1)

    def test_missing_fields_are_reported(self):
        result = create_auth_user(email='', password='pass12345', role='student')

        self.assertFalse(result['success'])
        self.assertIn('Missing required fields', result['error'])

    def test_non_superadmin_without_college_is_reported(self):
        result = create_auth_user(email='nocollege@example.com', password='pass12345', role='student')

        self.assertFalse(result['success'])
        self.assertFalse(self.user_model.objects.filter(username='nocollege@example.com').exists())


class UserModelTests(TestCase):
    def test_superuser_is_superadmin_without_college(self):
        user = get_user_model().objects.create_superuser('root', 'root@example.com', 'pass12345')

        self.assertEqual(user.role, 'superadmin')
        self.assertIsNone(user.college)

    def test_non_superadmin_requires_college(self):
        with self.assertRaises(ValueError):
            get_user_model().objects.create_user(username='loose', password='pass12345', role='accountant')


class AuthProvisionerSettingTests(TestCase):
    def test_default_provisioner(self):
        self.assertIs(get_auth_provisioner(), create_auth_user)

    @override_settings(STUDENT_AUTH_PROVISIONER='apps.core.users.tests.fake_provisioner')
    def test_provisioner_is_configurable(self):
        self.assertIs(get_auth_provisioner(), fake_provisioner)
