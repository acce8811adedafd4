from datetime import date
from decimal import Decimal
from io import StringIO
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.management import CommandError, call_command
from django.db import IntegrityError
from django.test import TestCase, override_settings
from django.utils import timezone

from apps.core.colleges.models import College, Major
from apps.core.finance.models import Invoice, InvoiceItem, Payment
from apps.core.finance.services import BillingRecordError
from apps.core.students.models import Student
from apps.core.students.services import allocate_student_id

from . import services
from .models import Application
from .services import (
    accept_application,
    convert_application,
    create_student_from_application,
    temporary_password,
)


def successful_provisioner():
    return mock.Mock(return_value={'success': True})


class AdmissionsBaseTestCase(TestCase):
    def setUp(self):
        self.today = timezone.localdate()
        self.year = self.today.year
        self.college = College.objects.create(
            id=7,
            name='College of Engineering',
            code='engineering',
            student_id_prefix='STU',
            student_id_format='{prefix}{year}{sequence:D4}',
            student_id_starting_number=1,
        )
        self.major = Major.objects.create(id=3, college=self.college, name_en='Civil Engineering', code='CE')

    def _application(self, **overrides):
        values = {
            'email': 'a@x.com',
            'college': self.college,
            'major': self.major,
            'first_name': 'Ann',
            'last_name': 'Lee',
        }
        values.update(overrides)
        return Application.objects.create(**values)


class ConvertApplicationTests(AdmissionsBaseTestCase):
    def test_creates_student_with_generated_id_and_password(self):
        application = self._application()

        result = create_student_from_application(application)

        self.assertTrue(result['success'])
        self.assertFalse(result['already_exists'])
        self.assertEqual(result['warnings'], [])
        student = result['student']
        self.assertEqual(student.student_id, f'STU{self.year}0001')
        self.assertEqual(student.name_en, 'Ann Lee')
        self.assertEqual(student.study_type, 'full_time')
        self.assertEqual(student.study_load, 'normal')
        self.assertEqual(student.study_approach, 'on_campus')
        self.assertEqual(student.status, Student.STATUS_ACTIVE)
        self.assertEqual(student.enrollment_date, self.today)
        self.assertEqual(student.college_id, 7)
        self.assertEqual(student.major_id, 3)
        self.assertEqual(result['password'], f'Temp{student.student_id}@{self.year}')

        user = get_user_model().objects.get(email='a@x.com')
        self.assertEqual(user.role, 'student')
        self.assertEqual(user.college, self.college)
        self.assertTrue(user.check_password(result['password']))

    def test_maps_application_details(self):
        application = self._application(
            application_number='APP-2024-0042',
            middle_name='Marie',
            first_name_ar='آن',
            last_name_ar='لي',
            phone='+96550000000',
            nationality='Egypt',
            street_address='12 Gulf Road',
            state_province='Hawalli',
            emergency_contact_relationship='Mother',
            gpa=Decimal('3.75'),
            scholarship_request=True,
            enrollment_date=date(2024, 9, 1),
        )

        student = convert_application(application, auth_provisioner=successful_provisioner())['student']

        self.assertEqual(student.name_en, 'Ann Marie Lee')
        self.assertEqual(student.name_ar, 'آن لي')
        self.assertEqual(student.mobile_phone, '+96550000000')
        self.assertTrue(student.is_international)
        self.assertEqual(student.address, '12 Gulf Road')
        self.assertEqual(student.state, 'Hawalli')
        self.assertEqual(student.emergency_contact_relation, 'Mother')
        self.assertEqual(student.high_school_gpa, Decimal('3.75'))
        self.assertTrue(student.has_scholarship)
        self.assertEqual(student.enrollment_date.isoformat(), '2024-09-01')
        self.assertEqual(student.notes, 'Created from application #APP-2024-0042')

    def test_arabic_name_joins_present_parts(self):
        application = self._application(first_name_ar='آن', middle_name_ar='ماري', last_name_ar='لي')

        student = convert_application(application, auth_provisioner=successful_provisioner())['student']

        self.assertEqual(student.name_ar, 'آن ماري لي')

    def test_missing_arabic_names_leave_name_ar_blank(self):
        student = convert_application(self._application(), auth_provisioner=successful_provisioner())['student']

        self.assertEqual(student.name_ar, '')

    def test_domestic_nationality_is_not_international(self):
        application = self._application(nationality='Kuwait')

        student = convert_application(application, auth_provisioner=successful_provisioner())['student']

        self.assertFalse(student.is_international)

    def test_explicit_password_is_used(self):
        provisioner = successful_provisioner()
        application = self._application()

        result = convert_application(application, 'Chosen-Pass-99', auth_provisioner=provisioner)

        self.assertEqual(result['password'], 'Chosen-Pass-99')
        provisioner.assert_called_once_with(
            email='a@x.com',
            password='Chosen-Pass-99',
            role='student',
            college_id=7,
            name='Ann Lee',
        )

    def test_second_conversion_reports_existing_student(self):
        provisioner = successful_provisioner()
        application = self._application()

        first = convert_application(application, auth_provisioner=provisioner)
        second = convert_application(application, auth_provisioner=provisioner)

        self.assertTrue(first['success'])
        self.assertFalse(second['success'])
        self.assertTrue(second['already_exists'])
        self.assertEqual(second['student'].pk, first['student'].pk)
        self.assertEqual(Student.objects.filter(email='a@x.com').count(), 1)
        self.assertEqual(provisioner.call_count, 1)

    def test_existing_student_is_matched_case_insensitively(self):
        convert_application(self._application(), auth_provisioner=successful_provisioner())
        duplicate = self._application(email='A@X.com')

        result = create_student_from_application(duplicate, auth_provisioner=successful_provisioner())

        self.assertTrue(result['already_exists'])
        self.assertEqual(Student.objects.count(), 1)

    def test_missing_college_fails(self):
        application = self._application(college=None)

        result = create_student_from_application(application)

        self.assertFalse(result['success'])
        self.assertFalse(result['already_exists'])
        self.assertIn('college_id', result['error'])
        self.assertFalse(Student.objects.exists())

    def test_missing_major_fails(self):
        application = self._application(major=None)

        result = create_student_from_application(application)

        self.assertFalse(result['success'])
        self.assertIn('major_id', result['error'])
        self.assertFalse(Student.objects.exists())

    def test_misconfigured_college_fails_allocation(self):
        College.objects.filter(pk=self.college.pk).update(student_id_format='{prefix}{year}')
        self.college.refresh_from_db()
        application = self._application()

        result = create_student_from_application(application)

        self.assertFalse(result['success'])
        self.assertIn('Failed to generate student ID', result['error'])


class StudentIdRaceTests(AdmissionsBaseTestCase):
    def setUp(self):
        super().setUp()
        self.raced_id = f'STU{self.year}0001'
        Student.objects.create(
            college=self.college,
            major=self.major,
            student_id=self.raced_id,
            first_name='Other',
            name_en='Other Applicant',
            email='other@x.com',
        )

    def test_collision_on_insert_allocates_a_new_id(self):
        calls = []

        def racing_allocator(college, year=None, *, taken=(), max_attempts=None):
            calls.append(set(taken))
            if len(calls) == 1:
                return self.raced_id
            return allocate_student_id(college, year, taken=taken, max_attempts=max_attempts)

        application = self._application()
        with mock.patch.object(services, 'allocate_student_id', side_effect=racing_allocator):
            result = convert_application(application, auth_provisioner=successful_provisioner())

        self.assertTrue(result['success'])
        self.assertNotEqual(result['student'].student_id, self.raced_id)
        self.assertEqual(result['student'].student_id, f'STU{self.year}0002')
        self.assertEqual(Student.objects.filter(email='a@x.com').count(), 1)
        self.assertEqual(calls[1], {self.raced_id})

    @override_settings(STUDENT_INSERT_MAX_ATTEMPTS=3)
    def test_repeated_collisions_exhaust_retries(self):
        application = self._application()
        with mock.patch.object(services, 'allocate_student_id', return_value=self.raced_id) as allocator:
            result = create_student_from_application(application, auth_provisioner=successful_provisioner())

        self.assertFalse(result['success'])
        self.assertIn('duplicate student ID', result['error'])
        self.assertEqual(allocator.call_count, 3)
        self.assertFalse(Student.objects.filter(email='a@x.com').exists())

    def test_other_insert_errors_fail_without_retry(self):
        application = self._application()
        error = IntegrityError('NOT NULL constraint failed: students_student.email')
        with mock.patch.object(Student.objects, 'create', side_effect=error) as create:
            result = create_student_from_application(application, auth_provisioner=successful_provisioner())

        self.assertFalse(result['success'])
        self.assertEqual(result['error'], 'NOT NULL constraint failed: students_student.email')
        self.assertEqual(create.call_count, 1)


class SecondaryEffectTests(AdmissionsBaseTestCase):
    def _paid_application(self, **overrides):
        values = {
            'application_number': 'APP-77',
            'registration_fee_amount': Decimal('100.00'),
            'registration_fee_paid_at': timezone.now(),
        }
        values.update(overrides)
        return self._application(**values)

    def test_auth_provisioner_exception_is_a_warning(self):
        provisioner = mock.Mock(side_effect=RuntimeError('auth service unreachable'))
        application = self._application()

        result = convert_application(application, auth_provisioner=provisioner)

        self.assertTrue(result['success'])
        self.assertTrue(Student.objects.filter(pk=result['student'].pk).exists())
        self.assertEqual(len(result['warnings']), 1)
        self.assertEqual(result['warnings'][0]['code'], 'auth_provisioning_failed')
        self.assertIn('unreachable', result['warnings'][0]['message'])
        self.assertEqual(result['password'], temporary_password(result['student'].student_id))

    def test_auth_provisioner_error_result_is_a_warning(self):
        provisioner = mock.Mock(return_value={'success': False, 'error': 'Email already registered'})

        result = convert_application(self._application(), auth_provisioner=provisioner)

        self.assertTrue(result['success'])
        self.assertEqual(
            result['warnings'],
            [{'code': 'auth_provisioning_failed', 'message': 'Email already registered'}],
        )

    def test_existing_login_does_not_block_conversion(self):
        get_user_model().objects.create_user(
            username='a@x.com',
            email='a@x.com',
            password='pass12345',
            role='student',
            college=self.college,
        )

        result = create_student_from_application(self._application())

        self.assertTrue(result['success'])
        self.assertEqual(result['warnings'][0]['code'], 'auth_provisioning_failed')

    def test_billing_failure_is_a_warning(self):
        recorder = mock.Mock(side_effect=BillingRecordError('numbering service down'))

        result = convert_application(
            self._paid_application(),
            auth_provisioner=successful_provisioner(),
            billing_recorder=recorder,
        )

        self.assertTrue(result['success'])
        self.assertTrue(Student.objects.filter(pk=result['student'].pk).exists())
        self.assertEqual(result['warnings'][0]['code'], 'billing_record_failed')
        self.assertIn('numbering service down', result['warnings'][0]['message'])

    def test_both_side_effects_failing_still_succeeds(self):
        result = convert_application(
            self._paid_application(),
            auth_provisioner=mock.Mock(side_effect=RuntimeError('down')),
            billing_recorder=mock.Mock(side_effect=BillingRecordError('down')),
        )

        self.assertTrue(result['success'])
        self.assertEqual(
            [warning['code'] for warning in result['warnings']],
            ['auth_provisioning_failed', 'billing_record_failed'],
        )

    def test_billing_runs_when_fee_amount_and_paid_timestamp_present(self):
        recorder = mock.Mock()
        application = self._paid_application()

        result = convert_application(application, auth_provisioner=successful_provisioner(), billing_recorder=recorder)

        recorder.assert_called_once_with(result['student'], application)

    def test_billing_skipped_without_paid_timestamp(self):
        recorder = mock.Mock()
        application = self._paid_application(registration_fee_paid_at=None)

        convert_application(application, auth_provisioner=successful_provisioner(), billing_recorder=recorder)

        recorder.assert_not_called()

    def test_billing_skipped_without_fee_amount(self):
        recorder = mock.Mock()
        application = self._paid_application(registration_fee_amount=None)

        convert_application(application, auth_provisioner=successful_provisioner(), billing_recorder=recorder)

        recorder.assert_not_called()

    def test_paid_application_gets_invoice_trail(self):
        application = self._paid_application()

        result = create_student_from_application(application)

        self.assertTrue(result['success'])
        invoice = Invoice.objects.get(student=result['student'])
        self.assertEqual(invoice.status, Invoice.STATUS_PAID)
        self.assertEqual(invoice.total_amount, Decimal('100.00'))
        self.assertEqual(invoice.pending_amount, Decimal('0'))
        self.assertEqual(InvoiceItem.objects.filter(invoice=invoice).count(), 1)
        self.assertEqual(Payment.objects.get(invoice=invoice).status, Payment.STATUS_VERIFIED)

    def test_unpaid_application_gets_no_invoice(self):
        result = create_student_from_application(self._application())

        self.assertTrue(result['success'])
        self.assertFalse(Invoice.objects.exists())


class AcceptApplicationTests(AdmissionsBaseTestCase):
    def test_accept_marks_review_and_creates_student(self):
        officer = get_user_model().objects.create_user(
            username='officer',
            password='pass12345',
            role='admissions_officer',
            college=self.college,
        )
        application = self._application()

        result = accept_application(application, reviewed_by=officer, notes='Meets requirements')

        application.refresh_from_db()
        self.assertEqual(application.status, Application.STATUS_ACCEPTED)
        self.assertEqual(application.reviewed_by, officer)
        self.assertIsNotNone(application.reviewed_at)
        self.assertEqual(application.review_notes, 'Meets requirements')
        self.assertTrue(result['success'])
        self.assertEqual(result['student'].email, 'a@x.com')


class ConvertApplicationsCommandTests(AdmissionsBaseTestCase):
    def test_converts_only_accepted_applications(self):
        accepted = self._application(status=Application.STATUS_ACCEPTED)
        self._application(email='pending@x.com', status=Application.STATUS_PENDING)
        out = StringIO()

        call_command('convert_applications', stdout=out)

        self.assertTrue(Student.objects.filter(email=accepted.email).exists())
        self.assertFalse(Student.objects.filter(email='pending@x.com').exists())
        self.assertIn('Created: 1, already converted: 0, failed: 0', out.getvalue())

    def test_rerun_reports_already_converted(self):
        self._application(status=Application.STATUS_ACCEPTED)
        call_command('convert_applications', stdout=StringIO())
        out = StringIO()

        call_command('convert_applications', '--college', 'engineering', stdout=out)

        self.assertIn('Created: 0, already converted: 1, failed: 0', out.getvalue())
        self.assertEqual(Student.objects.count(), 1)

    def test_password_applies_to_single_application(self):
        application = self._application(status=Application.STATUS_ACCEPTED)

        call_command(
            'convert_applications',
            '--application', str(application.pk),
            '--password', 'Chosen-Pass-99',
            stdout=StringIO(),
        )

        user = get_user_model().objects.get(email='a@x.com')
        self.assertTrue(user.check_password('Chosen-Pass-99'))

    def test_password_rejected_for_batches(self):
        first = self._application(status=Application.STATUS_ACCEPTED)
        second = self._application(email='b@x.com', status=Application.STATUS_ACCEPTED)

        with self.assertRaises(CommandError):
            call_command('convert_applications', '--password', 'Chosen-Pass-99', stdout=StringIO())
        with self.assertRaises(CommandError):
            call_command(
                'convert_applications',
                '--application', str(first.pk),
                '--application', str(second.pk),
                '--password', 'Chosen-Pass-99',
                stdout=StringIO(),
            )

        self.assertFalse(Student.objects.exists())
