from django.urls import path
from . import views

app_name = "studio"

urlpatterns = [
    path("blocks", views.block_operation, name="blocks"),
    path("preview", views.preview, name="preview"),
    path("youtube", views.youtube, name="youtube"),
    path("posts", views.create_post, name="posts"),
    path("posts/<str:post_id>", views.post_detail, name="post"),
]
