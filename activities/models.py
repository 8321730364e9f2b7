from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


def proof_document_path(instance, filename):
    # media/certificates/<student id>/<filename>
    return f"certificates/{instance.student_id}/{filename}"


class Activity(models.Model):
    """Extracurricular activity submitted by a student for review"""

    class Type(models.TextChoices):
        CONFERENCE = 'conference', 'Conference'
        WORKSHOP = 'workshop', 'Workshop'
        CERTIFICATION = 'certification', 'Certification'
        COMPETITION = 'competition', 'Competition'
        INTERNSHIP = 'internship', 'Internship'
        LEADERSHIP = 'leadership', 'Leadership'
        COMMUNITY_SERVICE = 'community_service', 'Community Service'
        CLUB_ACTIVITY = 'club_activity', 'Club Activity'
        ONLINE_COURSE = 'online_course', 'Online Course'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    student = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='activities'
    )
    title = models.CharField(max_length=200)
    type = models.CharField(max_length=30, choices=Type.choices)
    description = models.TextField(blank=True, null=True)
    date = models.DateField()
    duration = models.CharField(max_length=50, blank=True, null=True, help_text="e.g. 3 days, 2 weeks")
    organizer = models.CharField(max_length=200, blank=True, null=True)
    proof_document = models.FileField(upload_to=proof_document_path, blank=True, null=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    credits = models.DecimalField(
        max_digits=3,
        decimal_places=1,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('10'))]
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reviewed_activities'
    )
    remarks = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Activity"
        verbose_name_plural = "Activities"
        indexes = [
            models.Index(fields=['student', 'status'], name='activities__student_6f1c2e_idx'),
            models.Index(fields=['approved_by', 'updated_at'], name='activities__approve_9d4b7a_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.get_status_display()})"

    @property
    def is_pending(self):
        return self.status == self.Status.PENDING
