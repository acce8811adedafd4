from django.core.management.base import BaseCommand, CommandError

from apps.core.admissions.models import Application
from apps.core.admissions.services import create_student_from_application
from apps.core.colleges.models import College


class Command(BaseCommand):
    help = 'Creates students, logins and registration fee invoices for accepted applications.'

    def add_arguments(self, parser):
        parser.add_argument('--college', help='Restrict to a college code.')
        parser.add_argument('--application', type=int, action='append', dest='application_ids',
                            help='Convert only these application ids (repeatable).')
        parser.add_argument('--password',
                            help='Use this password instead of a generated temporary one. Requires exactly one --application.')

    def handle(self, *args, **options):
        if options['password'] and len(options['application_ids'] or []) != 1:
            raise CommandError('--password can only be used with exactly one --application.')

        queryset = Application.objects.filter(status=Application.STATUS_ACCEPTED).select_related('college', 'major')

        if options['college']:
            college = College.objects.filter(code=options['college']).first()
            if not college:
                raise CommandError(f"College {options['college']} does not exist.")
            queryset = queryset.for_college(college)

        if options['application_ids']:
            queryset = queryset.filter(id__in=options['application_ids'])

        created = skipped = failed = 0
        for application in queryset.order_by('id'):
            result = create_student_from_application(application, options['password'])
            if result['success']:
                created += 1
                self.stdout.write(self.style.SUCCESS(
                    f"{application}: created {result['student'].student_id} (password: {result['password']})"
                ))
                for warning in result['warnings']:
                    self.stdout.write(self.style.WARNING(f"  - {warning['code']}: {warning['message']}"))
            elif result['already_exists']:
                skipped += 1
                self.stdout.write(f"{application}: already converted to {result['student'].student_id}")
            else:
                failed += 1
                self.stdout.write(self.style.ERROR(f"{application}: {result['error']}"))

        self.stdout.write(f'Created: {created}, already converted: {skipped}, failed: {failed}')
