# users/admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """User admin keyed on email, with program selection fields"""
    list_display = ('email', 'name', 'role', 'program_category', 'program', 'student_id', 'is_active', 'created_at')
    list_filter = ('role', 'program_category', 'is_active', 'is_staff', 'created_at')
    search_fields = ('email', 'name', 'student_id')
    ordering = ('-created_at',)

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        (_('Personal info'), {'fields': ('name', 'phone', 'date_of_birth', 'gender', 'category', 'address')}),
        (_('Program'), {
            'fields': ('role', 'department', 'program_category', 'program', 'specialization',
                       'admission_year', 'student_id'),
        }),
        (_('Portfolio'), {
            'classes': ('collapse',),
            'fields': ('profile_picture', 'tenth_result', 'twelfth_result', 'languages', 'skills',
                       'hobbies', 'achievements', 'projects', 'certifications',
                       'linkedin_url', 'github_url', 'portfolio_url', 'other_details'),
        }),
        (_('Permissions'), {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        (_('Important dates'), {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )
