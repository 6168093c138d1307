from django.urls import path

from khajiit_wares.views import IndexView, MemeView

urlpatterns = [
    path("", IndexView.as_view()),
    path("meme", MemeView.as_view()),
]
