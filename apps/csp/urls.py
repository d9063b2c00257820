from django.urls import path

from . import views

urlpatterns = [
    path('iframe/preview/', views.iframe_preview, name='iframe_preview'),
]
