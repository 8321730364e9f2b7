"""
Property-based tests for the access scope policy.

Properties:
- a categorized faculty member sees exactly the activities of students in
  their own category
- the queryset filter and the single-record check always agree, including
  for activities owned by faculty or admin accounts
- admins see everything, students only their own records
"""

from datetime import date

from django.contrib.auth import get_user_model
from hypothesis import given, settings, strategies as st
from hypothesis.extra.django import TestCase

from programs.catalog import ProgramCategory

from .access import Operation, activity_filter, is_in_scope
from .models import Activity

User = get_user_model()

category_values = st.sampled_from([member.value for member in ProgramCategory])
owner_roles = st.sampled_from(['student', 'student', 'faculty', 'admin'])


class ActivityScopePropertyTests(TestCase):
    """Test activity_filter against is_in_scope over random populations"""

    def create_population(self, student_categories, roles=None):
        roles = roles or ['student'] * len(student_categories)
        students = []
        for index, (category, role) in enumerate(zip(student_categories, roles)):
            student = User.objects.create_user(
                email=f'student{index}@example.com',
                name=f'Student {index}',
                role=role,
                program_category=category,
                student_id=f'S{index:04d}' if role == 'student' else None,
            )
            Activity.objects.create(
                student=student,
                title=f'Activity {index}',
                type=Activity.Type.WORKSHOP,
                date=date(2024, 1, 1),
            )
            students.append(student)
        return students

    @settings(max_examples=25, deadline=None)
    @given(
        student_categories=st.lists(category_values, max_size=6),
        faculty_category=category_values,
    )
    def test_faculty_sees_exactly_own_category(self, student_categories, faculty_category):
        self.create_population(student_categories)
        faculty = User.objects.create_user(
            email='faculty@example.com', name='Faculty', role='faculty', program_category=faculty_category
        )

        visible = Activity.objects.filter(activity_filter(faculty, Operation.VIEW_ACTIVITIES))
        expected = Activity.objects.filter(student__program_category=faculty_category)

        self.assertEqual(set(visible), set(expected))

    @settings(max_examples=25, deadline=None)
    @given(
        owners=st.lists(st.tuples(category_values, owner_roles), min_size=1, max_size=6),
        faculty_category=st.one_of(st.none(), category_values),
    )
    def test_filter_agrees_with_record_check(self, owners, faculty_category):
        categories, roles = zip(*owners)
        students = self.create_population(categories, roles)
        faculty = User.objects.create_user(
            email='faculty@example.com', name='Faculty', role='faculty', program_category=faculty_category
        )

        visible_students = set(
            Activity.objects.filter(
                activity_filter(faculty, Operation.APPROVE_ACTIVITY)
            ).values_list('student_id', flat=True)
        )
        for student in students:
            self.assertEqual(
                student.pk in visible_students,
                is_in_scope(faculty, Operation.APPROVE_ACTIVITY, student),
            )

    @settings(max_examples=15, deadline=None)
    @given(student_categories=st.lists(category_values, min_size=1, max_size=5))
    def test_admin_and_student_scopes(self, student_categories):
        students = self.create_population(student_categories)
        admin = User.objects.create_user(email='admin@example.com', name='Admin', role='admin')

        self.assertEqual(
            Activity.objects.filter(activity_filter(admin, Operation.APPROVE_ACTIVITY)).count(),
            len(students),
        )
        for student in students:
            own = Activity.objects.filter(activity_filter(student, Operation.VIEW_ACTIVITIES))
            self.assertEqual({activity.student_id for activity in own}, {student.pk})
            self.assertFalse(
                Activity.objects.filter(activity_filter(student, Operation.APPROVE_ACTIVITY)).exists()
            )
