"""
URL configuration for the teatime project.

- /api/      : verset du jour, chat, thèmes mensuels (app mobile / web)
- /admin/    : administration Django (thèmes et archive quand le backend ORM est actif)
- /swagger/  : documentation de l'API
"""
from django.contrib import admin
from django.urls import path, include

from api.views import schema_view

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('api.urls')),
    path('swagger/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
]
