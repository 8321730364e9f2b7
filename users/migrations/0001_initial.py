import django.utils.timezone
from django.db import migrations, models

import users.managers
import users.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('name', models.CharField(max_length=100)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('role', models.CharField(choices=[('student', 'Student'), ('faculty', 'Faculty'), ('admin', 'Administrator')], default='student', max_length=20)),
                ('department', models.CharField(blank=True, help_text='Legacy free-text department', max_length=100, null=True)),
                ('program_category', models.CharField(blank=True, choices=[('Engineering & Technology', 'Engineering & Technology'), ('Computer Applications', 'Computer Applications'), ('Science', 'Science'), ('Agriculture & Fisheries', 'Agriculture & Fisheries'), ('Health Sciences & Pharmacy', 'Health Sciences & Pharmacy'), ('Nursing', 'Nursing'), ('Maritime Studies', 'Maritime Studies'), ('Management, Commerce & Law', 'Management, Commerce & Law'), ('Hospitality & Culinary Arts', 'Hospitality & Culinary Arts'), ('Ph.D. Programs', 'Ph.D. Programs')], max_length=100, null=True)),
                ('program', models.CharField(blank=True, max_length=100, null=True)),
                ('specialization', models.CharField(blank=True, max_length=150, null=True)),
                ('admission_year', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('student_id', models.CharField(blank=True, max_length=50, null=True, unique=True)),
                ('profile_picture', models.ImageField(blank=True, null=True, upload_to=users.models.profile_picture_path)),
                ('phone', models.CharField(blank=True, max_length=20, null=True)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('gender', models.CharField(blank=True, choices=[('Male', 'Male'), ('Female', 'Female'), ('Other', 'Other')], max_length=10, null=True)),
                ('category', models.CharField(blank=True, choices=[('General', 'General'), ('OBC', 'OBC'), ('SC', 'SC'), ('ST', 'ST')], max_length=10, null=True)),
                ('address', models.TextField(blank=True, null=True)),
                ('tenth_result', models.CharField(blank=True, max_length=50, null=True)),
                ('twelfth_result', models.CharField(blank=True, max_length=50, null=True)),
                ('languages', models.CharField(blank=True, help_text='Comma separated', max_length=255, null=True)),
                ('skills', models.CharField(blank=True, help_text='Comma separated', max_length=255, null=True)),
                ('hobbies', models.CharField(blank=True, max_length=255, null=True)),
                ('achievements', models.TextField(blank=True, null=True)),
                ('projects', models.TextField(blank=True, null=True)),
                ('certifications', models.TextField(blank=True, null=True)),
                ('linkedin_url', models.URLField(blank=True, null=True)),
                ('github_url', models.URLField(blank=True, null=True)),
                ('portfolio_url', models.URLField(blank=True, null=True)),
                ('other_details', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'User',
                'verbose_name_plural': 'Users',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['role', 'program_category'], name='users_user_role_2b3a0c_idx')],
            },
            managers=[
                ('objects', users.managers.UserManager()),
            ],
        ),
    ]
