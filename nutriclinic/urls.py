"""
URL configuration for the NutriClinic booking front-end.
"""
from django.contrib import admin
from django.conf import settings
from django.urls import path, include

urlpatterns = [
    path(settings.ADMIN_URL, admin.site.urls),
    path('', include('apps.pages.urls', namespace='pages')),
    path('accounts/', include('apps.accounts.urls', namespace='accounts')),
    path('plans/', include('apps.plans.urls', namespace='plans')),
    path('book/', include('apps.bookings.urls', namespace='bookings')),
    path('payments/', include('apps.payments.urls', namespace='payments')),
    path('profile/', include('apps.patients.urls', namespace='patients')),
    path('dashboard/', include('apps.dashboard.urls', namespace='dashboard')),
]

# Custom Error Handlers
handler404 = 'apps.pages.views.error_404'
handler500 = 'apps.pages.views.error_500'
handler403 = 'apps.pages.views.error_403'

if settings.DEBUG and 'debug_toolbar' in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns = [path('__debug__/', include(debug_toolbar.urls))] + urlpatterns
