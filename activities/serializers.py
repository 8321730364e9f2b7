from django.conf import settings
from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Activity
from .validators import validate_proof_document

User = get_user_model()


class ActivityStudentSerializer(serializers.ModelSerializer):
    studentId = serializers.CharField(source='student_id', read_only=True)
    programCategory = serializers.CharField(source='program_category', read_only=True)
    admissionYear = serializers.IntegerField(source='admission_year', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'email', 'studentId', 'department',
            'programCategory', 'program', 'specialization', 'admissionYear',
        ]
        read_only_fields = fields


class ApproverSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'email']
        read_only_fields = fields


class ActivitySerializer(serializers.ModelSerializer):
    """Read shape of an activity, with owner and reviewer summaries"""
    studentId = serializers.PrimaryKeyRelatedField(source='student', read_only=True)
    approvedBy = serializers.PrimaryKeyRelatedField(source='approved_by', read_only=True)
    student = ActivityStudentSerializer(read_only=True)
    approver = ApproverSerializer(source='approved_by', read_only=True)
    proofDocument = serializers.FileField(source='proof_document', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Activity
        fields = [
            'id', 'title', 'type', 'description', 'date', 'duration', 'organizer',
            'proofDocument', 'status', 'credits', 'remarks',
            'studentId', 'approvedBy', 'student', 'approver',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class ActivitySubmissionSerializer(serializers.ModelSerializer):
    """
    Student-side create/update. Status, credits and reviewer are never
    writable here; a submitted ``credits`` value is dropped.
    """
    title = serializers.CharField(min_length=3, max_length=200)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, allow_null=True)
    duration = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)
    organizer = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    certificate = serializers.FileField(
        source='proof_document',
        required=False,
        allow_null=True,
        validators=[validate_proof_document],
    )

    class Meta:
        model = Activity
        fields = ['title', 'type', 'description', 'date', 'duration', 'organizer', 'certificate']


class ReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[Activity.Status.APPROVED, Activity.Status.REJECTED])
    remarks = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
    credits = serializers.DecimalField(
        max_digits=3,
        decimal_places=1,
        min_value=0,
        max_value=settings.REVIEW_MAX_CREDITS,
        required=False,
        allow_null=True,
    )
