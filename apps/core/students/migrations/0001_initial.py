import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('colleges', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_id', models.CharField(max_length=50, unique=True)),
                ('first_name', models.CharField(max_length=100)),
                ('middle_name', models.CharField(blank=True, max_length=100)),
                ('last_name', models.CharField(blank=True, max_length=100)),
                ('first_name_ar', models.CharField(blank=True, max_length=100)),
                ('middle_name_ar', models.CharField(blank=True, max_length=100)),
                ('last_name_ar', models.CharField(blank=True, max_length=100)),
                ('name_en', models.CharField(max_length=255)),
                ('name_ar', models.CharField(blank=True, max_length=255)),
                ('email', models.EmailField(max_length=254)),
                ('phone', models.CharField(blank=True, max_length=30)),
                ('mobile_phone', models.CharField(blank=True, max_length=30)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('gender', models.CharField(blank=True, choices=[('male', 'Male'), ('female', 'Female')], max_length=10)),
                ('nationality', models.CharField(blank=True, max_length=100)),
                ('is_international', models.BooleanField(default=False)),
                ('address', models.TextField(blank=True)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('state', models.CharField(blank=True, max_length=100)),
                ('country', models.CharField(blank=True, max_length=100)),
                ('postal_code', models.CharField(blank=True, max_length=20)),
                ('enrollment_date', models.DateField(default=django.utils.timezone.localdate)),
                ('study_type', models.CharField(choices=[('full_time', 'Full Time'), ('part_time', 'Part Time')], default='full_time', max_length=20)),
                ('study_load', models.CharField(choices=[('normal', 'Normal'), ('reduced', 'Reduced'), ('overload', 'Overload')], default='normal', max_length=20)),
                ('study_approach', models.CharField(choices=[('on_campus', 'On Campus'), ('online', 'Online'), ('hybrid', 'Hybrid')], default='on_campus', max_length=20)),
                ('emergency_contact_name', models.CharField(blank=True, max_length=255)),
                ('emergency_contact_relation', models.CharField(blank=True, max_length=100)),
                ('emergency_phone', models.CharField(blank=True, max_length=30)),
                ('emergency_contact_email', models.EmailField(blank=True, max_length=254)),
                ('high_school_name', models.CharField(blank=True, max_length=255)),
                ('high_school_country', models.CharField(blank=True, max_length=100)),
                ('graduation_year', models.PositiveIntegerField(blank=True, null=True)),
                ('high_school_gpa', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('has_scholarship', models.BooleanField(default=False)),
                ('scholarship_percentage', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('suspended', 'Suspended'), ('graduated', 'Graduated'), ('withdrawn', 'Withdrawn')], default='active', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('college', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='students', to='colleges.college')),
                ('major', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='students', to='colleges.major')),
            ],
            options={
                'ordering': ['student_id'],
                'indexes': [
                    models.Index(fields=['college', 'student_id'], name='students_st_college_1f0a6d_idx'),
                    models.Index(fields=['email'], name='students_st_email_7c2b93_idx'),
                    models.Index(fields=['college', 'status'], name='students_st_college_b5e412_idx'),
                ],
            },
        ),
    ]
