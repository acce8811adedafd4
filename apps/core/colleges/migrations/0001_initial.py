import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='College',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('name_ar', models.CharField(blank=True, max_length=255)),
                ('code', models.CharField(blank=True, max_length=40, null=True, unique=True)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('phone', models.CharField(blank=True, max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('student_id_prefix', models.CharField(blank=True, default='STU', max_length=20)),
                ('student_id_format', models.CharField(blank=True, default='{prefix}{year}{sequence:D4}', max_length=100)),
                ('student_id_starting_number', models.PositiveIntegerField(default=1)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['code'], name='colleges_co_code_4b1f2e_idx'),
                    models.Index(fields=['is_active'], name='colleges_co_is_acti_9d3c51_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Major',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name_en', models.CharField(max_length=255)),
                ('name_ar', models.CharField(blank=True, max_length=255)),
                ('code', models.CharField(max_length=40)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('college', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='majors', to='colleges.college')),
            ],
            options={
                'ordering': ['college__name', 'name_en'],
                'constraints': [
                    models.UniqueConstraint(fields=('college', 'code'), name='unique_major_code_per_college'),
                ],
            },
        ),
    ]
