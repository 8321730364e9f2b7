import activities.models
import django.core.validators
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Activity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('type', models.CharField(choices=[('conference', 'Conference'), ('workshop', 'Workshop'), ('certification', 'Certification'), ('competition', 'Competition'), ('internship', 'Internship'), ('leadership', 'Leadership'), ('community_service', 'Community Service'), ('club_activity', 'Club Activity'), ('online_course', 'Online Course')], max_length=30)),
                ('description', models.TextField(blank=True, null=True)),
                ('date', models.DateField()),
                ('duration', models.CharField(blank=True, help_text='e.g. 3 days, 2 weeks', max_length=50, null=True)),
                ('organizer', models.CharField(blank=True, max_length=200, null=True)),
                ('proof_document', models.FileField(blank=True, null=True, upload_to=activities.models.proof_document_path)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], db_index=True, default='pending', max_length=10)),
                ('credits', models.DecimalField(decimal_places=1, default=Decimal('0'), max_digits=3, validators=[django.core.validators.MinValueValidator(Decimal('0')), django.core.validators.MaxValueValidator(Decimal('10'))])),
                ('remarks', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_activities', to=settings.AUTH_USER_MODEL)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activities', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Activity',
                'verbose_name_plural': 'Activities',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['student', 'status'], name='activities__student_6f1c2e_idx'), models.Index(fields=['approved_by', 'updated_at'], name='activities__approve_9d4b7a_idx')],
            },
        ),
    ]
