# activities/admin.py
from django.contrib import admin

from .models import Activity


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ('title', 'student', 'type', 'status', 'credits', 'approved_by', 'date', 'created_at')
    list_filter = ('status', 'type', 'student__program_category', 'created_at')
    search_fields = ('title', 'organizer', 'student__name', 'student__email', 'student__student_id')
    raw_id_fields = ('student', 'approved_by')
    readonly_fields = ('created_at', 'updated_at')
    date_hierarchy = 'date'
    ordering = ('-created_at',)
