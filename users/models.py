# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models

from programs.catalog import ProgramCategory, format_program_display

from .managers import UserManager


def profile_picture_path(instance, filename):
    # media/profiles/<user id>/<filename>
    return f"profiles/{instance.pk or 'new'}/{filename}"


class User(AbstractUser):
    """Account for students, faculty and administrators"""

    class Role(models.TextChoices):
        STUDENT = 'student', 'Student'
        FACULTY = 'faculty', 'Faculty'
        ADMIN = 'admin', 'Administrator'

    GENDER_CHOICES = [
        ('Male', 'Male'),
        ('Female', 'Female'),
        ('Other', 'Other'),
    ]

    CATEGORY_CHOICES = [
        ('General', 'General'),
        ('OBC', 'OBC'),
        ('SC', 'SC'),
        ('ST', 'ST'),
    ]

    username = None
    first_name = None
    last_name = None

    name = models.CharField(max_length=100)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.STUDENT)
    department = models.CharField(max_length=100, blank=True, null=True, help_text="Legacy free-text department")

    # Stored as the category display value, never the key
    program_category = models.CharField(max_length=100, choices=ProgramCategory.choices, blank=True, null=True)
    program = models.CharField(max_length=100, blank=True, null=True)
    specialization = models.CharField(max_length=150, blank=True, null=True)
    admission_year = models.PositiveSmallIntegerField(blank=True, null=True)
    student_id = models.CharField(max_length=50, unique=True, blank=True, null=True)

    # Profile / CV
    profile_picture = models.ImageField(upload_to=profile_picture_path, blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)
    date_of_birth = models.DateField(blank=True, null=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, null=True)
    category = models.CharField(max_length=10, choices=CATEGORY_CHOICES, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    tenth_result = models.CharField(max_length=50, blank=True, null=True)
    twelfth_result = models.CharField(max_length=50, blank=True, null=True)
    languages = models.CharField(max_length=255, blank=True, null=True, help_text="Comma separated")
    skills = models.CharField(max_length=255, blank=True, null=True, help_text="Comma separated")
    hobbies = models.CharField(max_length=255, blank=True, null=True)
    achievements = models.TextField(blank=True, null=True)
    projects = models.TextField(blank=True, null=True)
    certifications = models.TextField(blank=True, null=True)
    linkedin_url = models.URLField(blank=True, null=True)
    github_url = models.URLField(blank=True, null=True)
    portfolio_url = models.URLField(blank=True, null=True)
    other_details = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    objects = UserManager()

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['role', 'program_category'], name='users_user_role_2b3a0c_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_role_display()})"

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name.split(' ')[0] if self.name else self.email

    @property
    def program_display(self):
        return format_program_display(self.program, self.specialization)

    def is_student(self):
        return self.role == self.Role.STUDENT

    def is_faculty(self):
        return self.role == self.Role.FACULTY

    def is_admin_user(self):
        """Check if user is an administrator"""
        return self.role == self.Role.ADMIN or self.is_superuser
