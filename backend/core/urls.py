from django.urls import path

from .views import DashboardView, ReseedView

urlpatterns = [
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('admin/reseed', ReseedView.as_view(), name='admin-reseed'),
]
