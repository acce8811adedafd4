from django.db import IntegrityError, transaction
from django.test import TestCase

from apps.core.colleges.models import College, Major

from .models import Student
from .services import (
    StudentIdNotConfigured,
    StudentIdsExhausted,
    allocate_student_id,
    extract_sequence,
    is_student_id_collision,
    render_student_id,
)


class StudentIdFormattingTests(TestCase):
    def test_render_pads_sequence(self):
        self.assertEqual(
            render_student_id('{prefix}{year}{sequence:D4}', prefix='STU', year=2024, sequence=7),
            'STU20240007',
        )
        self.assertEqual(
            render_student_id('{prefix}-{year}-{sequence:D5}', prefix='ENG', year=2024, sequence=42),
            'ENG-2024-00042',
        )

    def test_render_does_not_truncate_wide_sequences(self):
        self.assertEqual(
            render_student_id('{prefix}{year}{sequence:D4}', prefix='STU', year=2024, sequence=12345),
            'STU202412345',
        )

    def test_extract_sequence_falls_back_to_trailing_digits(self):
        self.assertEqual(extract_sequence('LEGACY-12345'), 12345)
        self.assertEqual(extract_sequence('LEGACY-0042'), 42)
        self.assertEqual(extract_sequence('NO-DIGITS'), 0)

    def test_extract_sequence_without_fallback_skips_foreign_ids(self):
        self.assertEqual(extract_sequence('STU-0005-2023', fallback=False), 0)


class StudentIdAllocationTests(TestCase):
    def setUp(self):
        self.college = College.objects.create(
            id=7,
            name='Allocation College',
            code='allocation',
            student_id_prefix='STU',
            student_id_format='{prefix}{year}{sequence:D4}',
            student_id_starting_number=1,
        )
        self.major = Major.objects.create(college=self.college, name_en='Computing', code='CMP')

    def _create_student(self, student_id, college=None, major=None):
        return Student.objects.create(
            college=college or self.college,
            major=major or self.major,
            student_id=student_id,
            first_name='Test',
            name_en='Test Student',
            email=f'{student_id.lower()}@example.com',
        )

    def test_first_id_of_the_year_uses_starting_number(self):
        self.assertEqual(allocate_student_id(self.college, 2024), 'STU20240001')

    def test_next_id_follows_highest_existing_sequence(self):
        self._create_student('STU20240001')
        self.assertEqual(allocate_student_id(self.college, 2024), 'STU20240002')

        self._create_student('STU20240015')
        self.assertEqual(allocate_student_id(self.college, 2024), 'STU20240016')

    def test_previous_years_do_not_affect_sequence(self):
        self._create_student('STU20230044')
        self.assertEqual(allocate_student_id(self.college, 2024), 'STU20240001')

    def test_configured_starting_number(self):
        self.college.student_id_starting_number = 500
        self.college.save()
        self.assertEqual(allocate_student_id(self.college, 2024), 'STU20240500')

    def test_blank_configuration_uses_defaults(self):
        self.college.student_id_prefix = ''
        self.college.student_id_format = ''
        self.college.save()
        self.assertEqual(allocate_student_id(self.college, 2025), 'STU20250001')

    def test_d5_format(self):
        self.college.student_id_prefix = 'ENG'
        self.college.student_id_format = '{prefix}-{year}-{sequence:D5}'
        self.college.save()
        self._create_student('ENG-2024-00041')

        student_id = allocate_student_id(self.college, 2024)

        self.assertEqual(student_id, 'ENG-2024-00042')
        self.assertRegex(student_id, r'^ENG-2024-\d{5}$')

    def test_year_after_sequence_ignores_previous_years(self):
        self.college.student_id_format = '{prefix}-{sequence:D4}-{year}'
        self.college.save()
        self._create_student('STU-0005-2023')

        self.assertEqual(allocate_student_id(self.college, 2024), 'STU-0001-2024')

        self._create_student('STU-0001-2024')
        self.assertEqual(allocate_student_id(self.college, 2024), 'STU-0002-2024')

    def test_lowercase_legacy_ids_are_parsed_by_format(self):
        self._create_student('stu20240005')

        self.assertEqual(allocate_student_id(self.college, 2024), 'STU20240006')

    def test_sequence_grows_past_padding_width(self):
        self._create_student('STU20249999')
        self.assertEqual(allocate_student_id(self.college, 2024), 'STU202410000')

        self._create_student('STU202410000')
        self.assertEqual(allocate_student_id(self.college, 2024), 'STU202410001')

    def test_taken_ids_are_skipped(self):
        self._create_student('STU20240001')
        self.assertEqual(
            allocate_student_id(self.college, 2024, taken={'STU20240002', 'STU20240003'}),
            'STU20240004',
        )

    def test_exhausted_attempts(self):
        with self.assertRaises(StudentIdsExhausted):
            allocate_student_id(
                self.college,
                2024,
                taken={'STU20240001', 'STU20240002'},
                max_attempts=2,
            )

    def test_missing_college_is_not_configured(self):
        with self.assertRaises(StudentIdNotConfigured):
            allocate_student_id(None, 2024)

    def test_format_without_sequence_is_not_configured(self):
        College.objects.filter(pk=self.college.pk).update(student_id_format='{prefix}{year}')
        self.college.refresh_from_db()
        with self.assertRaises(StudentIdNotConfigured):
            allocate_student_id(self.college, 2024)

    def test_ids_of_other_colleges_are_out_of_scope(self):
        other = College.objects.create(name='Other College', code='other', student_id_prefix='STU')
        other_major = Major.objects.create(college=other, name_en='Law', code='LAW')
        self._create_student('STU20240009', college=other, major=other_major)

        self.assertEqual(allocate_student_id(self.college, 2024), 'STU20240001')

    def test_successive_allocations_are_unique(self):
        allocated = []
        for _ in range(25):
            student_id = allocate_student_id(self.college, 2024)
            self._create_student(student_id)
            allocated.append(student_id)

        self.assertEqual(len(set(allocated)), 25)
        self.assertEqual(allocated[0], 'STU20240001')
        self.assertEqual(allocated[-1], 'STU20240025')
        for student_id in allocated:
            self.assertRegex(student_id, r'^STU2024\d{4}$')


class StudentIdCollisionTests(TestCase):
    def setUp(self):
        self.college = College.objects.create(name='Collision College', code='collision')
        self.major = Major.objects.create(college=self.college, name_en='Physics', code='PHY')
        Student.objects.create(
            college=self.college,
            major=self.major,
            student_id='STU20240001',
            first_name='First',
            name_en='First Student',
            email='first@example.com',
        )

    def test_duplicate_student_id_is_a_collision(self):
        with self.assertRaises(IntegrityError) as ctx:
            with transaction.atomic():
                Student.objects.create(
                    college=self.college,
                    major=self.major,
                    student_id='STU20240001',
                    first_name='Second',
                    name_en='Second Student',
                    email='second@example.com',
                )

        self.assertTrue(is_student_id_collision(ctx.exception))

    def test_other_integrity_errors_are_not_collisions(self):
        self.assertFalse(
            is_student_id_collision(IntegrityError('NOT NULL constraint failed: students_student.email'))
        )
        self.assertFalse(
            is_student_id_collision(IntegrityError('UNIQUE constraint failed: users_user.username'))
        )

    def test_non_database_errors_are_not_collisions(self):
        self.assertFalse(is_student_id_collision(ValueError('student_id unique')))
