"""Placeholder pages guarded by the request gate.

The planner UI (todo list, calendar grid) is rendered by the frontend; these
views only give the gate real routes to protect.
"""

from django.http import HttpResponse
from django.utils.html import escape


def home(request):
    return HttpResponse("<h1>Todos</h1>")


def calendar(request, month=None):
    return HttpResponse(f"<h1>Calendar {escape(month or '')}</h1>")


def login(request):
    return HttpResponse("<h1>Sign in with a passkey</h1>")
