from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

from tasktrack.urls import api_urlpatterns, page_urlpatterns

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/", include(api_urlpatterns)),
    path("", include(page_urlpatterns)),
]
