from django.shortcuts import render

from apps.plans.catalog import PLANS


def home(request):
    """Landing page with the featured plans."""
    return render(request, 'index.html', {'plans': PLANS})


def error_404(request, exception=None):
    return render(request, 'errors/404.html', status=404)


def error_500(request):
    return render(request, 'errors/500.html', status=500)


def error_403(request, exception=None):
    return render(request, 'errors/403.html', status=403)
