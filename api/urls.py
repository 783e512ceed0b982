from django.urls import path

from api.views import ChatView, ThemeDetailView, ThemeListView, TodayScriptureView

urlpatterns = [
    path('scripture/today/', TodayScriptureView.as_view(), name='scripture-today'),
    path('chat/', ChatView.as_view(), name='chat'),

    path('themes/', ThemeListView.as_view(), name='theme-list'),
    path('themes/<str:month>/', ThemeDetailView.as_view(), name='theme-detail'),
]
