from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("accounts.urls")),
    path("api/", include("core.urls")),
    path("api/", include("rates.urls")),
    path("api/", include("quotes.urls")),
    path("api/", include("bookings.urls")),
    path("api/", include("summaries.urls")),
]
