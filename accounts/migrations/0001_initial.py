import uuid

import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import accounts.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('time_stamp_created', models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False)),
                ('time_stamp_modified', models.DateTimeField(blank=True, editable=False, null=True)),
                ('time_stamp_accessed', models.DateTimeField(blank=True, editable=False, null=True)),
                ('time_stamp_deleted', models.DateTimeField(blank=True, db_index=True, editable=False, null=True)),
                ('deleter_comment', models.CharField(blank=True, max_length=200, null=True)),
                ('username', models.CharField(help_text='Required. Letters, digits and @/./+/-/_ only.', max_length=200, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()])),
                ('password', models.CharField(blank=True, max_length=128, null=True, verbose_name='password')),
                ('first_name', models.CharField(blank=True, max_length=200, null=True)),
                ('last_name', models.CharField(blank=True, max_length=200, null=True)),
                ('display_name', models.CharField(blank=True, max_length=200, null=True)),
                ('email', models.EmailField(blank=True, max_length=256, null=True, unique=True)),
                ('time_stamp_last_seen', models.DateTimeField(blank=True, editable=False, null=True)),
                ('roles', models.JSONField(blank=True, default=list)),
                ('creator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='accounts.user')),
                ('deleter', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='accounts.user')),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='accounts.user')),
            ],
            options={
                'verbose_name': 'User',
                'verbose_name_plural': 'Users',
                'ordering': ['username'],
            },
            managers=[
                ('objects', accounts.models.UserManager()),
            ],
        ),
    ]
