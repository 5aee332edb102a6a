from django.urls import path

from tasktrack import views

api_urlpatterns = [
    path("", views.api_root, name="api_root"),
    path("health/", views.health_check, name="health_check"),
    path("auth/me/", views.auth_me, name="auth_me"),
    path("auth/logout/", views.auth_logout, name="auth_logout"),
    path("auth/passkeys/", views.passkey_list, name="passkey_list"),
    path("auth/register/begin/", views.passkey_register_begin, name="passkey_register_begin"),
    path("auth/register/complete/", views.passkey_register_complete, name="passkey_register_complete"),
    path("auth/login/begin/", views.passkey_login_begin, name="passkey_login_begin"),
    path("auth/login/complete/", views.passkey_login_complete, name="passkey_login_complete"),
]

page_urlpatterns = [
    path("", views.home, name="home"),
    path("login", views.login, name="login"),
    path("calendar", views.calendar, name="calendar"),
    path("calendar/<str:month>", views.calendar, name="calendar_month"),
]
