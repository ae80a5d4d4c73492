from django.urls import include, path

urlpatterns = [
    path("studio/", include("studio.urls")),
]
