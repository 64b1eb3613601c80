from django.urls import path

from .views import CustomerRegistrationView

app_name = "users"

urlpatterns = [
    path("register/", CustomerRegistrationView.as_view(), name="customer-register"),
]
