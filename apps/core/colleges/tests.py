from django.core.exceptions import ValidationError
from django.test import TestCase

from .models import College


class CollegeModelTests(TestCase):
    def test_code_is_derived_from_name_and_deduplicated(self):
        first = College.objects.create(name='College of Science')
        second = College.objects.create(name='College of Science')

        self.assertEqual(first.code, 'college_of_science')
        self.assertEqual(second.code, 'college_of_science_1')

    def test_default_student_id_configuration(self):
        college = College.objects.create(name='Default College')

        self.assertEqual(college.student_id_prefix, 'STU')
        self.assertEqual(college.student_id_format, '{prefix}{year}{sequence:D4}')
        self.assertEqual(college.student_id_starting_number, 1)

    def test_format_without_sequence_placeholder_is_rejected(self):
        college = College(name='Broken College', student_id_format='{prefix}{year}')
        with self.assertRaises(ValidationError):
            college.full_clean()

    def test_starting_number_must_be_positive(self):
        college = College(name='Zero College', student_id_starting_number=0)
        with self.assertRaises(ValidationError):
            college.full_clean()

    def test_d5_format_is_accepted(self):
        college = College(name='Wide College', code='wide', student_id_format='{prefix}-{year}-{sequence:D5}')
        college.full_clean()
