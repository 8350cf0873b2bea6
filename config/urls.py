from django.conf.urls.i18n import i18n_patterns
from django.contrib import admin
from django.urls import include, path
from django.views.i18n import JSONCatalog

urlpatterns = [
    path('admin/', admin.site.urls),
]

urlpatterns += i18n_patterns(
    path('', include('core.urls')),
    path('', include('accounts.urls')),
    path('translations/', JSONCatalog.as_view(), name='translations'),
    prefix_default_language=False,
)
