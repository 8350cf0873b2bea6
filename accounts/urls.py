from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    path('account/', views.index, name='index'),
    path('account/register/', views.register, name='register'),
    path('account/edit/', views.edit, name='edit'),
    path('account/login/', views.login, name='login'),
    path('account/logout/', views.logout, name='logout'),
]
