import re

from django.contrib.auth import get_user_model
from rest_framework import serializers

from activities.validators import validate_avatar
from programs.validators import validate_profile_fields

User = get_user_model()

PASSWORD_PATTERN = re.compile(r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$')
PASSWORD_MESSAGE = (
    'Password must contain at least 8 characters, one uppercase, '
    'one lowercase, one number and one special character'
)


class UserSerializer(serializers.ModelSerializer):
    """Public shape of a user record; program fields use the camelCase contract names"""
    programCategory = serializers.CharField(source='program_category', read_only=True)
    admissionYear = serializers.IntegerField(source='admission_year', read_only=True)
    studentId = serializers.CharField(source='student_id', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    profilePicture = serializers.ImageField(source='profile_picture', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'email', 'role', 'department',
            'programCategory', 'program', 'specialization', 'admissionYear',
            'studentId', 'isActive', 'profilePicture', 'createdAt',
        ]
        read_only_fields = fields


class StudentProfileSerializer(serializers.ModelSerializer):
    """Student CV/profile; empty strings are stored as null"""
    dateOfBirth = serializers.DateField(source='date_of_birth', required=False, allow_null=True)
    tenthResult = serializers.CharField(source='tenth_result', required=False, allow_null=True, allow_blank=True)
    twelfthResult = serializers.CharField(source='twelfth_result', required=False, allow_null=True, allow_blank=True)
    linkedinUrl = serializers.URLField(source='linkedin_url', required=False, allow_null=True, allow_blank=True)
    githubUrl = serializers.URLField(source='github_url', required=False, allow_null=True, allow_blank=True)
    portfolioUrl = serializers.URLField(source='portfolio_url', required=False, allow_null=True, allow_blank=True)
    otherDetails = serializers.CharField(source='other_details', required=False, allow_null=True, allow_blank=True)
    profilePicture = serializers.ImageField(source='profile_picture', required=False, allow_null=True,
                                            validators=[validate_avatar])
    programCategory = serializers.CharField(source='program_category', read_only=True)
    admissionYear = serializers.IntegerField(source='admission_year', read_only=True)
    studentId = serializers.CharField(source='student_id', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'email', 'department', 'programCategory', 'program',
            'specialization', 'admissionYear', 'studentId', 'profilePicture',
            'phone', 'dateOfBirth', 'gender', 'category', 'address',
            'tenthResult', 'twelfthResult', 'languages', 'skills', 'hobbies',
            'achievements', 'projects', 'certifications',
            'linkedinUrl', 'githubUrl', 'portfolioUrl', 'otherDetails', 'updatedAt',
        ]
        read_only_fields = [
            'id', 'name', 'email', 'department', 'program', 'specialization', 'updatedAt',
        ]

    def to_internal_value(self, data):
        # Multipart forms send blanks for cleared inputs
        if hasattr(data, 'dict'):
            data = data.dict()
        cleaned = {key: (None if value == '' else value) for key, value in data.items()}
        return super().to_internal_value(cleaned)


class ProgramFieldsMixin(serializers.Serializer):
    """Program selection inputs shared by registration and admin user management"""
    programCategory = serializers.CharField(source='program_category', required=False, allow_blank=True, allow_null=True)
    program = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    specialization = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    admissionYear = serializers.IntegerField(source='admission_year', required=False, allow_null=True,
                                             min_value=1950, max_value=2100)
    studentId = serializers.CharField(source='student_id', required=False, allow_blank=True, allow_null=True,
                                      max_length=50)

    def apply_program_policy(self, attrs, role):
        """Validate the program triple for ``role`` and write back normalized values"""
        normalized = validate_profile_fields(
            role,
            category=attrs.get('program_category'),
            program=attrs.get('program'),
            specialization=attrs.get('specialization'),
            admission_year=attrs.get('admission_year'),
        )
        attrs.update(normalized)
        if role != 'student':
            attrs['admission_year'] = None
            attrs['student_id'] = None
        elif not attrs.get('student_id'):
            attrs['student_id'] = None
        return attrs

    def validate_studentId(self, value):
        if not value:
            return value
        queryset = User.objects.filter(student_id=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('Student ID already exists')
        return value


class RegistrationSerializer(ProgramFieldsMixin):
    name = serializers.CharField(min_length=2, max_length=100)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(choices=['student', 'faculty'], default='student')
    department = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)

    def validate_password(self, value):
        if not PASSWORD_PATTERN.match(value):
            raise serializers.ValidationError(PASSWORD_MESSAGE)
        return value

    def validate(self, attrs):
        if attrs['role'] == 'student' and not attrs.get('student_id'):
            raise serializers.ValidationError({'studentId': 'This field is required for students'})
        return self.apply_program_policy(attrs, attrs['role'])

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)


class AdminUserSerializer(ProgramFieldsMixin, serializers.ModelSerializer):
    """Admin-side create/update of any account"""
    password = serializers.CharField(write_only=True, required=False, min_length=8)
    isActive = serializers.BooleanField(source='is_active', required=False)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'email', 'password', 'role', 'department',
            'programCategory', 'program', 'specialization', 'admissionYear',
            'studentId', 'isActive',
        ]
        read_only_fields = ['id']

    def validate_email(self, value):
        queryset = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            queryset = queryset.exclude(pk=self.instance.pk)
        if queryset.exists():
            raise serializers.ValidationError('User with this email already exists')
        return value

    def validate(self, attrs):
        if self.instance is None and not attrs.get('password'):
            raise serializers.ValidationError({'password': 'This field is required'})

        role = attrs.get('role', getattr(self.instance, 'role', 'student'))
        if self.instance is not None:
            # Partial updates are validated against the stored selection
            for field in ('program_category', 'program', 'specialization', 'admission_year', 'student_id'):
                attrs.setdefault(field, getattr(self.instance, field))
        return self.apply_program_policy(attrs, role)

    def create(self, validated_data):
        password = validated_data.pop('password')
        return User.objects.create_user(password=password, **validated_data)

    def update(self, instance, validated_data):
        password = validated_data.pop('password', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance
