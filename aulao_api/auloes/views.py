import logging
from smtplib import SMTPException

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.core.mail import send_mail
from django.db.models import ProtectedError, Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django.utils.crypto import get_random_string
from rest_framework import generics, status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import (
    applications,
    cleanup,
    enrollment,
    notifications,
    reconciliation,
    scheduling,
    statistics,
    templating,
    transparency,
)
from .authentication import IsAdmin, issue_admin_tokens
from .exceptions import ValidationError
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
from .pdf_report import generate_finance_report_pdf
from .serializers import (
    AdminAccountSerializer,
    AdminLoginSerializer,
    AdminRegisterSerializer,
    AdminSetNewPasswordSerializer,
    AdminUpdateSerializer,
    AttendanceSerializer,
    ClassRegistrationSerializer,
    DonationSerializer,
    EmailTemplateSerializer,
    InstitutionDonationSerializer,
    InstitutionSerializer,
    PresenceSerializer,
    PublicClassSerializer,
    RegistrationSerializer,
    ScheduledClassSerializer,
    SubjectSerializer,
    TeacherApplicationSerializer,
    TeacherStatusSerializer,
    VolunteerTeacherSerializer,
)

logger = logging.getLogger(__name__)

ADMIN_PERMISSIONS = [IsAuthenticated, IsAdmin]
UPLOAD_PARSERS = [MultiPartParser, FormParser, JSONParser]


# Admin Login View
class AdminLoginView(APIView):
    def post(self, request):
        serializer = AdminLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        username = serializer.validated_data['username']
        password = serializer.validated_data['password']

        try:
            account = AdminAccount.objects.get(username=username)
        except AdminAccount.DoesNotExist:
            return Response({'detail': 'Username not found'}, status=status.HTTP_401_UNAUTHORIZED)

        # Check password
        if not check_password(password, account.password):
            return Response({'detail': 'Invalid username or password'}, status=status.HTTP_401_UNAUTHORIZED)

        # Check if password is temporary
        if account.must_change_password:
            return Response(
                {
                    'must_change_password': True,
                    'detail': 'Your password is temporary. You must set a new password.'
                },
                status=status.HTTP_200_OK
            )

        refresh, access = issue_admin_tokens(account)

        return Response({
            'refresh': refresh,
            'access': access,
            'must_change_password': False,
            'admin': AdminAccountSerializer(account).data,
        }, status=status.HTTP_200_OK)

# Admin Set New Password View
class AdminSetNewPasswordView(APIView):
    def post(self, request):
        serializer = AdminSetNewPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        username = serializer.validated_data['username']

        try:
            account = AdminAccount.objects.get(username=username)
        except AdminAccount.DoesNotExist:
            return Response({'detail': 'Username not found'}, status=status.HTTP_401_UNAUTHORIZED)

        if not check_password(serializer.validated_data['current_password'], account.password):
            return Response({'detail': 'Invalid username or password'}, status=status.HTTP_401_UNAUTHORIZED)

        account.password = make_password(serializer.validated_data['new_password'])
        account.must_change_password = False
        account.save()

        return Response(
            {'detail': 'Password changed successfully.'},
            status=status.HTTP_200_OK
        )

# Upcoming Classes View
class UpcomingClassesView(APIView):
    def get(self, request):
        classes = enrollment.upcoming_classes()
        return Response({'data': PublicClassSerializer(classes, many=True).data})

# Class Registration View
class ClassRegistrationView(APIView):
    parser_classes = UPLOAD_PARSERS

    def post(self, request, class_id):
        serializer = ClassRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        proof_file = data.pop('payment_proof', None)
        registration = enrollment.register_student(class_id, data, proof_file=proof_file)

        return Response(
            {
                'detail': 'Registration completed. You will receive a confirmation email soon.',
                'registration_id': str(registration.id),
            },
            status=status.HTTP_201_CREATED
        )

# Subjects Seeking Teachers View
class SeekingSubjectsView(APIView):
    def get(self, request):
        subjects = Subject.objects.filter(is_seeking_teachers=True)
        if request.query_params.get('unscheduled') == 'true':
            subjects = subjects.filter(is_scheduled=False)
        return Response({'data': SubjectSerializer(subjects.order_by('name'), many=True).data})

# Teacher Application View
class TeacherApplicationView(APIView):
    parser_classes = UPLOAD_PARSERS

    def post(self, request):
        serializer = TeacherApplicationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        photo = data.pop('photo', None)
        academic_history = data.pop('academic_history')
        teacher = applications.submit_application(data, photo=photo, academic_history=academic_history)

        return Response(
            {'detail': 'Application received. We will contact you soon.', 'teacher_id': str(teacher.id)},
            status=status.HTTP_201_CREATED
        )

# Transparency View
class TransparencyView(APIView):
    def get(self, request):
        year_param = request.query_params.get('year')
        try:
            year = int(year_param) if year_param else timezone.localdate().year
        except ValueError:
            raise ValidationError(f"Invalid year: {year_param}")

        summary = transparency.transparency_summary(year)
        summary['donations'] = InstitutionDonationSerializer(summary['donations'], many=True).data
        return Response(summary)

# Platform Statistics View
class PlatformStatisticsView(APIView):
    def get(self, request):
        return Response(statistics.current_statistics())

# Admin Dashboard View
class AdminDashboardView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def get(self, request):
        return Response({
            'username': request.user.username,
            **statistics.dashboard_counters(),
        })

# Subjects
class SubjectListCreateView(generics.ListCreateAPIView):
    permission_classes = ADMIN_PERMISSIONS
    serializer_class = SubjectSerializer
    queryset = Subject.objects.order_by('-created_at')

class SubjectDetailView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = ADMIN_PERMISSIONS
    serializer_class = SubjectSerializer
    queryset = Subject.objects.all()

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError:
            raise ValidationError('This subject still has scheduled classes.')

# Teachers
class TeacherListView(generics.ListAPIView):
    permission_classes = ADMIN_PERMISSIONS
    serializer_class = VolunteerTeacherSerializer

    def get_queryset(self):
        queryset = VolunteerTeacher.objects.order_by('-created_at')
        teacher_status = self.request.query_params.get('status')
        if teacher_status:
            queryset = queryset.filter(status=teacher_status)
        return queryset

class TeacherDetailView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = ADMIN_PERMISSIONS
    serializer_class = VolunteerTeacherSerializer
    queryset = VolunteerTeacher.objects.all()

class TeacherStatusView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def post(self, request, pk):
        serializer = TeacherStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        teacher = applications.set_teacher_status(pk, serializer.validated_data['status'])
        return Response(VolunteerTeacherSerializer(teacher).data)

# Scheduled Classes
class ClassListCreateView(APIView):
    permission_classes = ADMIN_PERMISSIONS
    parser_classes = UPLOAD_PARSERS

    def get(self, request):
        classes = ScheduledClass.objects.select_related('subject', 'teacher').order_by('-date')
        return Response({'data': ScheduledClassSerializer(classes, many=True).data})

    def post(self, request):
        serializer = ScheduledClassSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        material_file = data.pop('material_file', None)
        scheduled_class, warning = scheduling.create_class(data, material_file=material_file)

        response_data = ScheduledClassSerializer(scheduled_class).data
        if warning:
            response_data['warning'] = warning
        return Response(response_data, status=status.HTTP_201_CREATED)

class ClassDetailView(APIView):
    permission_classes = ADMIN_PERMISSIONS
    parser_classes = UPLOAD_PARSERS

    def get(self, request, pk):
        scheduled_class = get_object_or_404(ScheduledClass, pk=pk)
        return Response(ScheduledClassSerializer(scheduled_class).data)

    def put(self, request, pk):
        return self._update(request, pk, partial=False)

    def patch(self, request, pk):
        return self._update(request, pk, partial=True)

    def _update(self, request, pk, partial):
        scheduled_class = get_object_or_404(ScheduledClass, pk=pk)
        serializer = ScheduledClassSerializer(scheduled_class, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        material_file = data.pop('material_file', None)
        scheduled_class = scheduling.update_class(scheduled_class, data, material_file=material_file)
        return Response(ScheduledClassSerializer(scheduled_class).data)

    def delete(self, request, pk):
        report = cleanup.delete_scheduled_class(pk)
        return Response(
            {
                'detail': 'Class deleted. Related donations were preserved.',
                'registrations_deleted': report.registrations_deleted,
                'payment_details_deleted': report.payment_details_deleted,
                'donations_unlinked': report.donations_unlinked,
            },
            status=status.HTTP_200_OK
        )

class ClassNotifyView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def post(self, request, pk):
        result = notifications.notify_participants(pk)
        return Response({
            'detail': result.message,
            'success_count': result.success_count,
            'error_count': result.error_count,
        })

# Registrations
class RegistrationListView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def get(self, request):
        registrations = ClassRegistration.objects.select_related('scheduled_class')

        class_id = request.query_params.get('class_id')
        if class_id:
            registrations = registrations.filter(scheduled_class_id=class_id)

        overall = registrations
        search = request.query_params.get('search')
        if search:
            registrations = registrations.filter(
                Q(student_name__icontains=search)
                | Q(student_email__icontains=search)
                | Q(student_registration_number__icontains=search)
                | Q(scheduled_class__title__icontains=search)
            )

        presence = request.query_params.get('status')
        if presence == 'confirmed':
            registrations = registrations.filter(confirmed_presence=True)
        elif presence == 'pending':
            registrations = registrations.filter(confirmed_presence=False)
        elif presence == 'attended':
            registrations = registrations.filter(attended=True)

        donation = request.query_params.get('donation')
        if donation == 'none':
            registrations = registrations.filter(Q(donation_type__isnull=True) | Q(donation_type=''))
        elif donation:
            registrations = registrations.filter(donation_type=donation)

        return Response({
            'data': RegistrationSerializer(registrations.order_by('-created_at'), many=True).data,
            'summary': {
                'total': overall.count(),
                'confirmed': overall.filter(confirmed_presence=True).count(),
                'attended': overall.filter(attended=True).count(),
                'food_donations': overall.filter(donation_type=ClassRegistration.DonationType.FOOD).count(),
                'financial_donations': overall.filter(
                    donation_type__in=ClassRegistration.MONETARY_DONATION_TYPES
                ).count(),
            },
        })

class RegistrationDetailView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def delete(self, request, pk):
        reconciliation.delete_registration(pk)
        return Response({'detail': f"Registration {pk} deleted successfully"}, status=status.HTTP_200_OK)

class RegistrationAttendanceView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def post(self, request, pk):
        serializer = AttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        attended = serializer.validated_data['attended']
        result = reconciliation.set_attendance(pk, attended)

        return Response({
            'detail': (
                'Attendance recorded and presence confirmed.' if attended
                else 'Attendance removed and presence unconfirmed.'
            ),
            'registration': RegistrationSerializer(result.registration).data,
            'donation_id': str(result.donation.id) if result.donation else None,
            'donation_created': result.created,
            'warning': result.warning,
        })

class RegistrationPresenceView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def post(self, request, pk):
        serializer = PresenceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        registration = reconciliation.set_presence(pk, serializer.validated_data['confirmed'])
        return Response({'registration': RegistrationSerializer(registration).data})

# Finance Report View
class FinanceReportView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def get(self, request):
        summary = transparency.finance_summary()

        if request.query_params.get('download') == 'pdf':
            return generate_finance_report_pdf(summary)

        return Response({
            'total_money_donations': f"{summary['total_money_donations']:.2f}",
            'classes_with_donations': summary['classes_with_donations'],
            'donations_by_class': [
                {**row, 'money_amount': f"{row['money_amount']:.2f}"}
                for row in summary['donations_by_class']
            ],
        })

# Ledger Donations
class DonationListCreateView(generics.ListCreateAPIView):
    permission_classes = ADMIN_PERMISSIONS
    serializer_class = DonationSerializer
    queryset = Donation.objects.order_by('-donation_date', '-created_at')

# Institutions
class InstitutionListCreateView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def get(self, request):
        institutions = Institution.objects.order_by('-created_at')
        return Response({'data': InstitutionSerializer(institutions, many=True).data})

    def post(self, request):
        serializer = InstitutionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        institution = transparency.create_institution(request.user.admin_id, serializer.validated_data)
        return Response(InstitutionSerializer(institution).data, status=status.HTTP_201_CREATED)

class InstitutionDetailView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def put(self, request, pk):
        serializer = InstitutionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        institution = transparency.update_institution(request.user.admin_id, pk, serializer.validated_data)
        return Response(InstitutionSerializer(institution).data)

    def delete(self, request, pk):
        transparency.delete_institution(request.user.admin_id, pk)
        return Response({'detail': 'Institution deleted successfully'}, status=status.HTTP_200_OK)

class InstitutionDonationListCreateView(generics.ListCreateAPIView):
    permission_classes = ADMIN_PERMISSIONS
    serializer_class = InstitutionDonationSerializer
    queryset = InstitutionDonation.objects.select_related('institution').order_by('-donation_date', '-created_at')

class InstitutionDonationDetailView(generics.DestroyAPIView):
    permission_classes = ADMIN_PERMISSIONS
    queryset = InstitutionDonation.objects.all()

# Email Template View
class EmailTemplateView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def get(self, request):
        template = EmailTemplate.objects.order_by('-created_at').first()
        if template is None:
            return Response({'id': None, **templating.DEFAULT_TEMPLATE})
        return Response(EmailTemplateSerializer(template).data)

    def put(self, request):
        template = EmailTemplate.objects.order_by('-created_at').first()
        serializer = EmailTemplateSerializer(template, data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

# Admin Accounts
class AdminAccountListCreateView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def get(self, request):
        accounts = AdminAccount.objects.order_by('-created_at')
        return Response({'data': AdminAccountSerializer(accounts, many=True).data})

    def post(self, request):
        serializer = AdminRegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        username = serializer.validated_data['username']
        email = serializer.validated_data.get('email') or None

        if AdminAccount.objects.filter(username=username).exists():
            return Response({'detail': 'This username is already registered.'}, status=status.HTTP_400_BAD_REQUEST)

        account = AdminAccount.objects.create(
            username=username,
            full_name=serializer.validated_data['full_name'],
            email=email,
            password=make_password(serializer.validated_data['password']),
            must_change_password=serializer.validated_data.get('must_change_password', False)
        )

        return Response(AdminAccountSerializer(account).data, status=status.HTTP_201_CREATED)

class AdminAccountDetailView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def patch(self, request, pk):
        account = get_object_or_404(AdminAccount, pk=pk)
        serializer = AdminUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        username = data.get('username')
        if username and AdminAccount.objects.filter(username=username).exclude(pk=account.pk).exists():
            return Response({'detail': 'This username is already registered.'}, status=status.HTTP_400_BAD_REQUEST)

        for field in ('username', 'full_name'):
            if data.get(field):
                setattr(account, field, data[field])
        if 'email' in data:
            account.email = data['email'] or None
        # Blank password keeps the current one
        if data.get('password'):
            account.password = make_password(data['password'])
        account.save()

        return Response(AdminAccountSerializer(account).data)

    def delete(self, request, pk):
        account = get_object_or_404(AdminAccount, pk=pk)
        if str(account.pk) == str(request.user.admin_id):
            return Response({'detail': 'You cannot delete your own account.'}, status=status.HTTP_400_BAD_REQUEST)

        account.delete()
        return Response({'detail': 'Administrator removed successfully.'}, status=status.HTTP_200_OK)

class AdminResetPasswordView(APIView):
    permission_classes = ADMIN_PERMISSIONS

    def post(self, request, pk):
        account = get_object_or_404(AdminAccount, pk=pk)

        temp_password = get_random_string(length=10)
        account.password = make_password(temp_password)
        account.must_change_password = True
        account.save()

        emailed = False
        if account.email:
            try:
                send_mail(
                    subject="Aulão Solidário: password reset",
                    message=(
                        f"Hi {account.full_name},\n"
                        f"Your administrator password was reset.\n"
                        f"Username: {account.username}\n"
                        f"Temporary Password: {temp_password}\n"
                        f"Please log in and set a new password as soon as possible.\n"
                        f"Thanks,\nEquipe Aulão Solidário"
                    ),
                    from_email=settings.DEFAULT_FROM_EMAIL,
                    recipient_list=[account.email],
                    fail_silently=False
                )
            except (SMTPException, OSError):
                # The response carries the temporary password instead
                logger.exception("Could not email reset password to admin %s", account.pk)
            else:
                emailed = True

        response_data = {'detail': f"Password reset for {account.username}.", 'emailed': emailed}
        if not emailed:
            response_data['temporary_password'] = temp_password
        return Response(response_data, status=status.HTTP_200_OK)
