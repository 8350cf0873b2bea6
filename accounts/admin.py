import logging

from django.contrib import admin, messages

from core.models import IncludeDeleted
from .models import User
from .repositories import UserRepository

logger = logging.getLogger(__name__)


class DeletionStateFilter(admin.SimpleListFilter):
    """Filter users by soft delete state"""
    title = 'deletion state'
    parameter_name = 'deleted'

    def lookups(self, request, model_admin):
        return (
            (str(IncludeDeleted.NO.value), 'Active'),
            (str(IncludeDeleted.YES.value), 'All'),
            (str(IncludeDeleted.EXCLUSIVE.value), 'Deleted'),
        )

    def value(self):
        # Active users unless asked otherwise, as in UserRepository
        return super().value() or str(IncludeDeleted.NO.value)

    def choices(self, changelist):
        for lookup, title in self.lookup_choices:
            yield {
                'selected': self.value() == lookup,
                'query_string': changelist.get_query_string({self.parameter_name: lookup}),
                'display': title,
            }

    def queryset(self, request, queryset):
        return queryset.filter_deleted(int(self.value()))


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = [
        'username',
        'email',
        'display_name',
        'get_roles',
        'is_deleted',
        'time_stamp_created',
        'time_stamp_last_seen',
    ]
    list_filter = [DeletionStateFilter, 'time_stamp_created']
    search_fields = ['username', 'first_name', 'last_name', 'display_name', 'email']
    readonly_fields = [
        'id',
        'time_stamp_created',
        'time_stamp_modified',
        'time_stamp_accessed',
        'time_stamp_deleted',
        'time_stamp_last_seen',
        'deleter',
        'deleter_comment',
    ]
    ordering = ['username']
    actions = ['soft_delete_users', 'undelete_users']

    fieldsets = (
        ('Account', {
            'fields': ('id', 'username', 'email', 'roles')
        }),
        ('Personal Information', {
            'fields': ('first_name', 'last_name', 'display_name')
        }),
        ('Ownership', {
            'fields': ('creator', 'owner')
        }),
        ('Deletion', {
            'fields': ('time_stamp_deleted', 'deleter', 'deleter_comment'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': (
                'time_stamp_created',
                'time_stamp_modified',
                'time_stamp_accessed',
                'time_stamp_last_seen',
            ),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Roles')
    def get_roles(self, obj):
        roles = obj.get_roles()
        return ', '.join(roles) if roles else 'No roles'

    @admin.display(description='Deleted', boolean=True)
    def is_deleted(self, obj):
        return obj.is_deleted

    @admin.action(description='Soft delete selected users')
    def soft_delete_users(self, request, queryset):
        repository = UserRepository(logger=logger)
        count = 0
        for user in queryset.alive():
            repository.soft_delete(user, user=request.user, comment='Deleted from admin.')
            count += 1
        self.message_user(request, f'{count} user(s) deleted.', messages.SUCCESS)

    @admin.action(description='Restore selected users')
    def undelete_users(self, request, queryset):
        repository = UserRepository(logger=logger)
        count = 0
        for user in queryset.dead():
            repository.undelete(user)
            count += 1
        self.message_user(request, f'{count} user(s) restored.', messages.SUCCESS)
