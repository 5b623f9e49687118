from rest_framework import serializers

from .models import (
    AdminAccount,
    ClassRegistration,
    Donation,
    EmailTemplate,
    Institution,
    InstitutionDonation,
    ScheduledClass,
    Subject,
    VolunteerTeacher,
)
from .scheduling import parse_topics


# Auth
class AdminLoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

class AdminSetNewPasswordSerializer(serializers.Serializer):
    username = serializers.CharField()
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True, min_length=6, max_length=128)

class AdminRegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=50)
    full_name = serializers.CharField(max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    password = serializers.CharField(write_only=True, min_length=6)
    must_change_password = serializers.BooleanField(default=False)

class AdminUpdateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=50, required=False)
    full_name = serializers.CharField(max_length=150, required=False)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    password = serializers.CharField(write_only=True, min_length=6, required=False, allow_blank=True)

class AdminAccountSerializer(serializers.ModelSerializer):
    class Meta:
        model = AdminAccount
        fields = ('id', 'username', 'full_name', 'email', 'must_change_password', 'created_at', 'updated_at')


# Public registration & applications
class ClassRegistrationSerializer(serializers.Serializer):
    student_name = serializers.CharField(max_length=150)
    student_email = serializers.EmailField()
    student_phone = serializers.CharField(max_length=30, required=False, allow_blank=True, allow_null=True)
    student_registration_number = serializers.CharField(max_length=50)
    donation_type = serializers.ChoiceField(
        choices=ClassRegistration.DonationType.choices, required=False, allow_blank=True, allow_null=True
    )
    donation_amount = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    payment_method = serializers.CharField(max_length=30, required=False, allow_blank=True, allow_null=True)
    payment_proof = serializers.FileField(required=False, allow_null=True)

class TeacherApplicationSerializer(serializers.Serializer):
    full_name = serializers.CharField(min_length=2, max_length=150)
    email = serializers.EmailField()
    phone = serializers.CharField(min_length=10, max_length=30)
    university = serializers.CharField(min_length=2, max_length=150)
    course = serializers.CharField(min_length=2, max_length=150)
    availability = serializers.CharField(min_length=10)
    subjects = serializers.ListField(child=serializers.CharField(), min_length=1)
    motivation = serializers.CharField(required=False, allow_blank=True)
    experience_level = serializers.CharField(max_length=50, required=False, allow_blank=True)
    registration_number = serializers.CharField(min_length=3, max_length=50)
    photo = serializers.FileField(required=False, allow_null=True)
    academic_history = serializers.FileField()


# Admin actions
class AttendanceSerializer(serializers.Serializer):
    attended = serializers.BooleanField()

class PresenceSerializer(serializers.Serializer):
    confirmed = serializers.BooleanField()

class TeacherStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[VolunteerTeacher.Status.APPROVED, VolunteerTeacher.Status.REJECTED])


# Models
class TopicsField(serializers.Field):
    def to_internal_value(self, data):
        if not isinstance(data, (str, list)):
            raise serializers.ValidationError('Topics must be a list or a comma-separated string.')
        return parse_topics(data)

    def to_representation(self, value):
        return list(value or [])

class SubjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = Subject
        fields = ('id', 'name', 'description', 'is_scheduled', 'is_seeking_teachers', 'created_at', 'updated_at')

class VolunteerTeacherSerializer(serializers.ModelSerializer):
    class Meta:
        model = VolunteerTeacher
        fields = (
            'id', 'full_name', 'email', 'phone', 'registration_number', 'university', 'course',
            'availability', 'experience_level', 'motivation', 'subjects_can_teach', 'photo_url',
            'academic_history_url', 'status', 'approved', 'created_at', 'updated_at',
        )
        read_only_fields = ('status', 'approved', 'photo_url', 'academic_history_url')

class ScheduledClassSerializer(serializers.ModelSerializer):
    topics = TopicsField(required=False)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    subject_name = serializers.CharField(source='subject.name', read_only=True)
    teacher_name = serializers.CharField(source='teacher.full_name', read_only=True, default=None)
    effective_status = serializers.CharField(read_only=True)
    material_file = serializers.FileField(write_only=True, required=False, allow_null=True)

    class Meta:
        model = ScheduledClass
        fields = (
            'id', 'title', 'subject', 'subject_name', 'teacher', 'teacher_name', 'date', 'start_time',
            'end_time', 'location', 'max_participants', 'topics', 'materials_needed', 'file_url',
            'status', 'effective_status', 'material_file', 'created_at', 'updated_at',
        )
        read_only_fields = ('file_url',)

    def validate_teacher(self, teacher):
        if teacher is not None and not teacher.approved:
            raise serializers.ValidationError('Only approved teachers can run a class.')
        return teacher

    def validate(self, attrs):
        start = attrs.get('start_time', getattr(self.instance, 'start_time', None))
        end = attrs.get('end_time', getattr(self.instance, 'end_time', None))
        if start and end and end <= start:
            raise serializers.ValidationError({'end_time': 'End time must be after start time.'})
        return attrs

class PublicClassSerializer(serializers.ModelSerializer):
    subject_name = serializers.CharField(source='subject.name', read_only=True)
    teacher_name = serializers.CharField(source='teacher.full_name', read_only=True, default=None)
    registrations_count = serializers.IntegerField(read_only=True)
    is_full = serializers.SerializerMethodField()

    class Meta:
        model = ScheduledClass
        fields = (
            'id', 'title', 'subject_name', 'teacher_name', 'date', 'start_time', 'end_time', 'location',
            'max_participants', 'registrations_count', 'is_full', 'topics', 'materials_needed', 'file_url',
        )

    def get_is_full(self, obj):
        return obj.registrations_count >= obj.max_participants

class RegistrationSerializer(serializers.ModelSerializer):
    class_title = serializers.CharField(source='scheduled_class.title', read_only=True)
    class_date = serializers.DateField(source='scheduled_class.date', read_only=True)
    class_location = serializers.CharField(source='scheduled_class.location', read_only=True)

    class Meta:
        model = ClassRegistration
        fields = (
            'id', 'scheduled_class', 'class_title', 'class_date', 'class_location', 'student_name',
            'student_email', 'student_phone', 'student_registration_number', 'donation_type',
            'donation_amount', 'payment_method', 'payment_proof_url', 'confirmed_presence', 'attended',
            'created_at', 'updated_at',
        )
        read_only_fields = fields

class DonationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Donation
        fields = (
            'id', 'scheduled_class', 'registration_id', 'institution', 'institution_donated_to', 'type',
            'amount', 'food_weight_kg', 'description', 'donation_date', 'created_at',
        )
        read_only_fields = ('registration_id',)

class InstitutionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Institution
        fields = ('id', 'name', 'type', 'contact_info', 'address', 'description', 'created_at', 'updated_at')

class InstitutionDonationSerializer(serializers.ModelSerializer):
    institution_name = serializers.CharField(source='institution.name', read_only=True, default=None)

    class Meta:
        model = InstitutionDonation
        fields = (
            'id', 'institution', 'institution_name', 'type', 'amount', 'food_weight_kg', 'description',
            'donation_date', 'created_at',
        )
        extra_kwargs = {'institution': {'allow_null': False, 'required': True}}

class EmailTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmailTemplate
        fields = ('id', 'subject', 'body', 'signature', 'updated_at')
