import random
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from faker import Faker

from apps.core.admissions.models import Application
from apps.core.colleges.models import College, Major
from apps.core.users.models import User


class Command(BaseCommand):
    help = 'Seeds the database with colleges, majors and admissions applications.'

    def add_arguments(self, parser):
        parser.add_argument('--applications', type=int, default=20)
        parser.add_argument('--paid-ratio', type=float, default=0.5)

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write('Seeding database...')

        fake = Faker()

        if not User.objects.filter(username='superadmin').exists():
            User.objects.create_superuser('superadmin', 'superadmin@example.com', 'password')
            self.stdout.write(self.style.SUCCESS('Successfully created superadmin user.'))

        colleges = []
        for name, prefix in [('College of Engineering', 'ENG'), ('College of Business', 'BUS')]:
            college, created = College.objects.get_or_create(
                name=name,
                defaults={
                    'email': fake.company_email(),
                    'phone': fake.phone_number()[:20],
                    'student_id_prefix': prefix,
                },
            )
            colleges.append(college)
            if created:
                self.stdout.write(self.style.SUCCESS(f'Successfully created college: {college.name}'))

            for code, major_name in [('GEN', 'General Studies'), ('ADV', 'Advanced Studies')]:
                major, created = Major.objects.get_or_create(
                    college=college,
                    code=code,
                    defaults={'name_en': f'{major_name} ({prefix})'},
                )
                if created:
                    self.stdout.write(self.style.SUCCESS(f'  - Successfully created major: {major.name_en}'))

            admissions_username = f'admissions_{prefix.lower()}'
            officer, created = User.objects.get_or_create(
                username=admissions_username,
                defaults={
                    'role': User.ROLE_ADMISSIONS,
                    'college': college,
                    'is_staff': True,
                },
            )
            if created:
                officer.set_password('password')
                officer.save()
                self.stdout.write(self.style.SUCCESS(f'Successfully created admissions officer: {officer.username}'))

        for _ in range(options['applications']):
            college = random.choice(colleges)
            paid = random.random() < options['paid_ratio']
            application = Application.objects.create(
                application_number=f'APP-{fake.unique.random_number(digits=8, fix_len=True)}',
                college=college,
                major=random.choice(list(college.majors.all())),
                first_name=fake.first_name(),
                last_name=fake.last_name(),
                email=fake.unique.email(),
                phone=fake.phone_number()[:30],
                date_of_birth=fake.date_of_birth(minimum_age=17, maximum_age=25),
                gender=random.choice(['male', 'female']),
                nationality=random.choice(['Kuwait', 'Egypt', 'Jordan', 'India']),
                city=fake.city(),
                country=fake.country()[:100],
                high_school_name=f'{fake.last_name()} High School',
                graduation_year=timezone.localdate().year,
                gpa=Decimal(str(round(random.uniform(2.0, 4.0), 2))),
                registration_fee_amount=Decimal('50.00') if paid else None,
                registration_fee_paid_at=timezone.now() if paid else None,
                registration_fee_payment_method='online_payment' if paid else '',
            )
            self.stdout.write(self.style.SUCCESS(f'Successfully created application: {application}'))

        self.stdout.write(self.style.SUCCESS('Database seeding complete!'))
