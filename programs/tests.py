from django.test import SimpleTestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from backend.exceptions import InvalidProgramSelection, MissingMandatoryField, UnresolvedCategory

from .catalog import (
    ProgramCategory,
    categories,
    find_program,
    format_program_display,
    programs_for,
    specializations_for,
)
from .validators import (
    resolve_category_key,
    resolve_category_value,
    validate_profile_fields,
    validate_selection,
)


class ProgramCatalogTests(SimpleTestCase):
    """Test catalog lookups"""

    def test_categories_are_ordered_key_value_pairs(self):
        pairs = categories()
        self.assertEqual(len(pairs), 10)
        self.assertEqual(pairs[0], ('ENGINEERING', 'Engineering & Technology'))
        self.assertEqual(pairs[-1], ('PHD', 'Ph.D. Programs'))
        self.assertEqual(len({key for key, _ in pairs}), 10)
        self.assertEqual(len({value for _, value in pairs}), 10)

    def test_programs_for_accepts_key_and_display_value(self):
        by_key = programs_for('ENGINEERING')
        by_value = programs_for('Engineering & Technology')
        self.assertEqual(by_key, by_value)
        self.assertEqual([program.degree for program in by_key], ['B.Tech', 'M.Tech'])

    def test_programs_for_unknown_category_is_empty(self):
        self.assertEqual(programs_for('Underwater Basket Weaving'), [])
        self.assertEqual(programs_for(''), [])
        self.assertEqual(programs_for(None), [])

    def test_specializations_for(self):
        self.assertIn('Robotics & Automation', specializations_for('ENGINEERING', 'B.Tech'))
        self.assertEqual(specializations_for('COMPUTER_APP', 'BCA'), [])
        self.assertEqual(specializations_for('ENGINEERING', 'MBA'), [])
        self.assertEqual(specializations_for('NOPE', 'B.Tech'), [])

    def test_find_program(self):
        program = find_program('Management, Commerce & Law', 'MBA')
        self.assertEqual(program.name, 'Master of Business Administration')
        self.assertIsNone(find_program('MANAGEMENT', 'B.Tech'))

    def test_lateral_entry_flag(self):
        self.assertTrue(find_program('ENGINEERING', 'B.Tech').has_lateral_entry)
        self.assertFalse(find_program('ENGINEERING', 'M.Tech').has_lateral_entry)

    def test_format_program_display(self):
        self.assertEqual(
            format_program_display('B.Tech', 'Robotics & Automation'),
            'B.Tech - Robotics & Automation'
        )
        self.assertEqual(format_program_display('BCA'), 'BCA')
        self.assertEqual(format_program_display('BCA', ''), 'BCA')
        self.assertEqual(format_program_display(None), '')

    def test_category_lookup(self):
        self.assertIs(ProgramCategory.lookup('NURSING'), ProgramCategory.NURSING)
        self.assertIs(ProgramCategory.lookup('Nursing'), ProgramCategory.NURSING)
        self.assertIsNone(ProgramCategory.lookup('nursing'))
        self.assertIsNone(ProgramCategory.lookup(42))


class ProgramSelectionValidatorTests(SimpleTestCase):
    """Test strict selection and per-role mandatory field checks"""

    def test_resolve_category_value(self):
        self.assertEqual(resolve_category_value('SCIENCE'), 'Science')
        self.assertEqual(resolve_category_value('Maritime Studies'), 'Maritime Studies')
        self.assertIsNone(resolve_category_value('Astrology'))

    def test_resolve_category_key(self):
        self.assertEqual(resolve_category_key('Hospitality & Culinary Arts'), 'HOSPITALITY')
        self.assertEqual(resolve_category_key('HOSPITALITY'), 'HOSPITALITY')
        self.assertIsNone(resolve_category_key('Astrology'))

    def test_valid_selection_is_normalized_to_display_value(self):
        self.assertEqual(
            validate_selection('ENGINEERING', 'B.Tech', 'Robotics & Automation'),
            ('Engineering & Technology', 'B.Tech', 'Robotics & Automation')
        )

    def test_empty_program_and_specialization_are_valid(self):
        self.assertEqual(validate_selection('SCIENCE'), ('Science', '', ''))
        self.assertEqual(validate_selection('SCIENCE', 'M.Sc', ''), ('Science', 'M.Sc', ''))

    def test_unknown_category(self):
        with self.assertRaises(UnresolvedCategory):
            validate_selection('Astrology', 'B.Tech')

    def test_unresolved_category_is_an_invalid_selection(self):
        with self.assertRaises(InvalidProgramSelection):
            validate_selection('Astrology')

    def test_program_outside_category(self):
        with self.assertRaises(InvalidProgramSelection) as ctx:
            validate_selection('ENGINEERING', 'MBA')
        self.assertNotIsInstance(ctx.exception, UnresolvedCategory)

    def test_specialization_outside_program(self):
        with self.assertRaises(InvalidProgramSelection):
            validate_selection('ENGINEERING', 'B.Tech', 'Finance')

    def test_specialization_without_program(self):
        with self.assertRaises(InvalidProgramSelection):
            validate_selection('ENGINEERING', '', 'Robotics & Automation')

    def test_student_mandatory_fields(self):
        with self.assertRaises(MissingMandatoryField) as ctx:
            validate_profile_fields('student', None, 'B.Tech', 'Robotics & Automation', 2023)
        self.assertEqual(ctx.exception.field, 'programCategory')

        with self.assertRaises(MissingMandatoryField) as ctx:
            validate_profile_fields('student', 'ENGINEERING', None, None, 2023)
        self.assertEqual(ctx.exception.field, 'program')

        with self.assertRaises(MissingMandatoryField) as ctx:
            validate_profile_fields('student', 'ENGINEERING', 'B.Tech', 'Robotics & Automation', None)
        self.assertEqual(ctx.exception.field, 'admissionYear')

        with self.assertRaises(MissingMandatoryField) as ctx:
            validate_profile_fields('student', 'ENGINEERING', 'B.Tech', None, 2023)
        self.assertEqual(ctx.exception.field, 'specialization')

    def test_student_program_without_specializations(self):
        fields = validate_profile_fields('student', 'COMPUTER_APP', 'BCA', None, 2024)
        self.assertEqual(fields, {
            'program_category': 'Computer Applications',
            'program': 'BCA',
            'specialization': None,
        })

    def test_faculty_requires_category_only(self):
        with self.assertRaises(MissingMandatoryField):
            validate_profile_fields('faculty')
        fields = validate_profile_fields('faculty', 'NURSING')
        self.assertEqual(fields['program_category'], 'Nursing')
        self.assertIsNone(fields['program'])

    def test_admin_needs_nothing(self):
        self.assertEqual(validate_profile_fields('admin'), {
            'program_category': None,
            'program': None,
            'specialization': None,
        })


class ProgramCatalogAPITests(APITestCase):
    """Test the public catalog endpoints"""

    def test_list_categories(self):
        response = self.client.get(reverse('programs:list_categories'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 10)
        self.assertEqual(response.data['data'][1], {'key': 'COMPUTER_APP', 'value': 'Computer Applications'})

    def test_list_programs_by_key(self):
        response = self.client.get(reverse('programs:list_programs'), {'category': 'NURSING'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['category'], 'Nursing')
        self.assertEqual([p['degree'] for p in response.data['data']], ['B.Sc Nursing', 'GNM'])
        self.assertIn('hasLateralEntry', response.data['data'][0])

    def test_list_programs_unknown_category(self):
        response = self.client.get(reverse('programs:list_programs'), {'category': 'Astrology'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], [])

    def test_list_specializations(self):
        response = self.client.get(
            reverse('programs:list_specializations'),
            {'category': 'Hospitality & Culinary Arts', 'program': 'B.Sc HHA'}
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [item['name'] for item in response.data['data']],
            ['With Swiss Diploma', 'Regular']
        )
        self.assertEqual(response.data['data'][1]['display'], 'B.Sc HHA - Regular')
