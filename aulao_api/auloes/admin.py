from django.conf import settings
from django.contrib import admin
from django.contrib.auth.hashers import make_password
from django.core.mail import send_mail
from django.utils.crypto import get_random_string

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


@admin.register(AdminAccount)
class AdminAccountAdmin(admin.ModelAdmin):
    list_display = ('username', 'full_name', 'email', 'must_change_password')
    fields = ('username', 'full_name', 'email', 'password', 'must_change_password')

    def save_model(self, request, obj, form, change):
        if change and 'password' not in form.changed_data:
            super().save_model(request, obj, form, change)
            return

        temp_password = form.cleaned_data.get('password') or get_random_string(length=10)
        obj.password = make_password(temp_password)
        if not change:
            obj.must_change_password = True
        super().save_model(request, obj, form, change)

        if not change and obj.email:
            send_mail(
                subject="Bem-vindo ao Aulão Solidário!",
                message=(
                    f"Olá {obj.full_name},\n"
                    f"Sua conta de administrador está pronta.\n"
                    f"Usuário: {obj.username}\n"
                    f"Senha temporária: {temp_password}\n"
                    f"Entre e defina uma nova senha assim que possível.\n"
                    f"Equipe Aulão Solidário"
                ),
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[obj.email],
                fail_silently=False
            )


@admin.register(ScheduledClass)
class ScheduledClassAdmin(admin.ModelAdmin):
    list_display = ('title', 'subject', 'date', 'start_time', 'location', 'status')
    list_filter = ('status', 'subject')

    def has_delete_permission(self, request, obj=None):
        # Classes are removed through the API cleanup, which keeps donations
        return False


@admin.register(ClassRegistration)
class ClassRegistrationAdmin(admin.ModelAdmin):
    list_display = ('student_name', 'student_email', 'scheduled_class', 'donation_type', 'attended')
    list_filter = ('donation_type', 'attended', 'confirmed_presence')
    search_fields = ('student_name', 'student_email', 'student_registration_number')


@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    list_display = ('type', 'amount', 'scheduled_class', 'registration_id', 'donation_date')
    list_filter = ('type',)


admin.site.register(Subject)
admin.site.register(VolunteerTeacher)
admin.site.register(Institution)
admin.site.register(InstitutionDonation)
admin.site.register(EmailTemplate)
