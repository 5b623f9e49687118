import uuid

from django.db import models
from django.db.models import Q
from django.utils import timezone

UNDEFINED_LOCATION = 'Local a Definir'


class TimestampedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class AdminAccount(TimestampedModel):
    username = models.CharField(max_length=50, unique=True)
    full_name = models.CharField(max_length=150)
    email = models.EmailField(null=True, blank=True)
    password = models.CharField(max_length=128)
    must_change_password = models.BooleanField(default=False)

    def __str__(self):
        return self.username


class Subject(TimestampedModel):
    name = models.CharField(max_length=100)
    description = models.TextField(null=True, blank=True)
    is_scheduled = models.BooleanField(default=False)
    is_seeking_teachers = models.BooleanField(default=False)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class VolunteerTeacher(TimestampedModel):
    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    full_name = models.CharField(max_length=150)
    email = models.EmailField()
    phone = models.CharField(max_length=30, null=True, blank=True)
    registration_number = models.CharField(max_length=50)
    university = models.CharField(max_length=150, null=True, blank=True)
    course = models.CharField(max_length=150, null=True, blank=True)
    availability = models.TextField(null=True, blank=True)
    experience_level = models.CharField(max_length=50, null=True, blank=True)
    motivation = models.TextField(null=True, blank=True)
    subjects_can_teach = models.JSONField(default=list)
    photo_url = models.URLField(max_length=500, null=True, blank=True)
    academic_history_url = models.URLField(max_length=500)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    approved = models.BooleanField(default=False)

    def __str__(self):
        return self.full_name


class ScheduledClass(TimestampedModel):
    class Status(models.TextChoices):
        SCHEDULED = 'agendado', 'Agendado'
        PENDING_LOCATION = 'pendente', 'Pendente'

    title = models.CharField(max_length=200)
    subject = models.ForeignKey(Subject, on_delete=models.PROTECT, related_name='classes')
    teacher = models.ForeignKey(
        VolunteerTeacher, on_delete=models.SET_NULL, null=True, blank=True, related_name='classes'
    )
    date = models.DateField()
    start_time = models.TimeField()
    end_time = models.TimeField()
    location = models.CharField(max_length=255, default=UNDEFINED_LOCATION)
    max_participants = models.PositiveIntegerField(default=50)
    topics = models.JSONField(default=list, blank=True)
    materials_needed = models.TextField(null=True, blank=True)
    file_url = models.URLField(max_length=500, null=True, blank=True)
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.SCHEDULED)

    def __str__(self):
        return self.title

    @property
    def has_defined_location(self):
        location = (self.location or '').strip()
        return bool(location) and location != UNDEFINED_LOCATION

    @property
    def effective_status(self):
        if not self.has_defined_location:
            return self.Status.PENDING_LOCATION
        return self.status or self.Status.SCHEDULED


class ClassRegistration(TimestampedModel):
    class DonationType(models.TextChoices):
        FOOD = 'alimento', 'Alimento'
        PAY_AT_EVENT = 'pagamento_hora', 'Pagamento na hora'
        PAY_IN_ADVANCE = 'pagamento_antecipado', 'Pagamento antecipado'

    MONETARY_DONATION_TYPES = frozenset({DonationType.PAY_AT_EVENT, DonationType.PAY_IN_ADVANCE})

    # Deleting a class goes through auloes.cleanup, never an implicit cascade
    scheduled_class = models.ForeignKey(ScheduledClass, on_delete=models.PROTECT, related_name='registrations')
    student_name = models.CharField(max_length=150)
    student_email = models.EmailField()
    student_phone = models.CharField(max_length=30, null=True, blank=True)
    student_registration_number = models.CharField(max_length=50)
    donation_type = models.CharField(max_length=25, choices=DonationType.choices, null=True, blank=True)
    donation_amount = models.CharField(max_length=20, null=True, blank=True)
    payment_method = models.CharField(max_length=30, null=True, blank=True)
    payment_proof_url = models.URLField(max_length=500, null=True, blank=True)
    confirmed_presence = models.BooleanField(default=False)
    attended = models.BooleanField(default=False)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.student_name} - {self.scheduled_class_id}"

    @property
    def has_monetary_pledge(self):
        return self.donation_type in self.MONETARY_DONATION_TYPES


class PaymentDetail(TimestampedModel):
    registration = models.ForeignKey(ClassRegistration, on_delete=models.CASCADE, related_name='payment_details')
    payment_type = models.CharField(max_length=30, default='dinheiro_antecipado')
    amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    proof_file_name = models.CharField(max_length=255, null=True, blank=True)
    proof_file_url = models.URLField(max_length=500, null=True, blank=True)
    payment_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=20, default='pending')
    admin_notes = models.TextField(null=True, blank=True)


class Institution(TimestampedModel):
    name = models.CharField(max_length=200)
    type = models.CharField(max_length=100)
    contact_info = models.CharField(max_length=255, null=True, blank=True)
    address = models.CharField(max_length=255, null=True, blank=True)
    description = models.TextField(null=True, blank=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class Donation(TimestampedModel):
    class Type(models.TextChoices):
        MONEY = 'dinheiro', 'Dinheiro'
        FOOD = 'alimento', 'Alimento'
        OTHER = 'outro', 'Outro'

    scheduled_class = models.ForeignKey(
        ScheduledClass, on_delete=models.SET_NULL, null=True, blank=True, related_name='donations'
    )
    # Plain back-reference: ledger entries outlive the registration they came from
    registration_id = models.UUIDField(null=True, blank=True, db_index=True)
    institution = models.ForeignKey(
        Institution, on_delete=models.SET_NULL, null=True, blank=True, related_name='ledger_donations'
    )
    institution_donated_to = models.CharField(max_length=200, null=True, blank=True)
    type = models.CharField(max_length=10, choices=Type.choices)
    amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    food_weight_kg = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    donation_date = models.DateField(default=timezone.localdate, null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['registration_id'],
                condition=Q(type='dinheiro') & Q(registration_id__isnull=False),
                name='unique_money_donation_per_registration',
            ),
        ]


class InstitutionDonation(TimestampedModel):
    class Type(models.TextChoices):
        MONEY = 'dinheiro', 'Dinheiro'
        FOOD = 'alimentos', 'Alimentos'
        MIXED = 'misto', 'Misto'

    institution = models.ForeignKey(
        Institution, on_delete=models.SET_NULL, null=True, blank=True, related_name='donations'
    )
    type = models.CharField(max_length=10, choices=Type.choices)
    amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    food_weight_kg = models.DecimalField(max_digits=8, decimal_places=2, null=True, blank=True)
    description = models.TextField(null=True, blank=True)
    donation_date = models.DateField(default=timezone.localdate, null=True, blank=True)

    class Meta:
        ordering = ['-donation_date', '-created_at']


class EmailTemplate(TimestampedModel):
    subject = models.CharField(max_length=255)
    body = models.TextField()
    signature = models.TextField()


class PlatformStatistics(TimestampedModel):
    year = models.PositiveIntegerField(unique=True)
    total_classes = models.PositiveIntegerField(default=0)
    total_students = models.PositiveIntegerField(default=0)

    class Meta:
        verbose_name_plural = 'platform statistics'
