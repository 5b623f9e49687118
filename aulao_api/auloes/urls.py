from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from . import views

urlpatterns = [
    # Auth
    path('auth/login/', views.AdminLoginView.as_view(), name='admin-login'),
    path('auth/set-password/', views.AdminSetNewPasswordView.as_view(), name='admin-set-password'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token-refresh'),

    # Public
    path('classes/upcoming/', views.UpcomingClassesView.as_view(), name='upcoming-classes'),
    path('classes/<uuid:class_id>/register/', views.ClassRegistrationView.as_view(), name='class-register'),
    path('subjects/seeking/', views.SeekingSubjectsView.as_view(), name='seeking-subjects'),
    path('teachers/apply/', views.TeacherApplicationView.as_view(), name='teacher-apply'),
    path('transparency/', views.TransparencyView.as_view(), name='transparency'),
    path('statistics/', views.PlatformStatisticsView.as_view(), name='platform-statistics'),

    # Admin
    path('admin/dashboard/', views.AdminDashboardView.as_view(), name='admin-dashboard'),
    path('admin/subjects/', views.SubjectListCreateView.as_view(), name='admin-subjects'),
    path('admin/subjects/<uuid:pk>/', views.SubjectDetailView.as_view(), name='admin-subject-detail'),
    path('admin/teachers/', views.TeacherListView.as_view(), name='admin-teachers'),
    path('admin/teachers/<uuid:pk>/', views.TeacherDetailView.as_view(), name='admin-teacher-detail'),
    path('admin/teachers/<uuid:pk>/status/', views.TeacherStatusView.as_view(), name='admin-teacher-status'),
    path('admin/classes/', views.ClassListCreateView.as_view(), name='admin-classes'),
    path('admin/classes/<uuid:pk>/', views.ClassDetailView.as_view(), name='admin-class-detail'),
    path('admin/classes/<uuid:pk>/notify/', views.ClassNotifyView.as_view(), name='admin-class-notify'),
    path('admin/registrations/', views.RegistrationListView.as_view(), name='admin-registrations'),
    path('admin/registrations/<uuid:pk>/', views.RegistrationDetailView.as_view(), name='admin-registration-detail'),
    path(
        'admin/registrations/<uuid:pk>/attendance/',
        views.RegistrationAttendanceView.as_view(),
        name='admin-registration-attendance'
    ),
    path(
        'admin/registrations/<uuid:pk>/presence/',
        views.RegistrationPresenceView.as_view(),
        name='admin-registration-presence'
    ),
    path('admin/finance/', views.FinanceReportView.as_view(), name='admin-finance'),
    path('admin/donations/', views.DonationListCreateView.as_view(), name='admin-donations'),
    path('admin/institutions/', views.InstitutionListCreateView.as_view(), name='admin-institutions'),
    path('admin/institutions/<uuid:pk>/', views.InstitutionDetailView.as_view(), name='admin-institution-detail'),
    path(
        'admin/institution-donations/',
        views.InstitutionDonationListCreateView.as_view(),
        name='admin-institution-donations'
    ),
    path(
        'admin/institution-donations/<uuid:pk>/',
        views.InstitutionDonationDetailView.as_view(),
        name='admin-institution-donation-detail'
    ),
    path('admin/email-template/', views.EmailTemplateView.as_view(), name='admin-email-template'),
    path('admin/accounts/', views.AdminAccountListCreateView.as_view(), name='admin-accounts'),
    path('admin/accounts/<uuid:pk>/', views.AdminAccountDetailView.as_view(), name='admin-account-detail'),
    path(
        'admin/accounts/<uuid:pk>/reset-password/',
        views.AdminResetPasswordView.as_view(),
        name='admin-account-reset-password'
    ),
]
