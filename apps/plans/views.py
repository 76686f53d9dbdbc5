from django.http import Http404
from django.shortcuts import render

from .catalog import PLANS, get_plan


def plan_list(request):
    """Catalog of consultation plans."""
    return render(request, 'plans/list.html', {'plans': PLANS})


def plan_detail(request, slug):
    plan = get_plan(slug)
    if plan is None:
        raise Http404('Unknown plan')
    return render(request, 'plans/detail.html', {'plan': plan})
