"""
Seed management command.

Populates the database with the club's catalog:
  - Machine gym       (open access, monthly)
  - Yoga / Pilates    (small group, monthly, 4 sessions a month)
  - Personal training (one-on-one, per 60-minute session)
and, with --demo-member, one member profile to book with.

Usage:
    python manage.py seed_data
    python manage.py seed_data --flush   # wipe and re-seed the catalog
"""
from django.core.management.base import BaseCommand
from apps.courses.models import Course, CourseType
from apps.members.models import Profile


COURSES = [
    {
        'name': 'マシンジムコース',
        'course_type': CourseType.UNRESTRICTED,
        'price': 8000, 'is_monthly': True,
        'description': '最新マシン完備のジムで、自分のペースでトレーニング',
    },
    {
        'name': 'ヨガ・ピラティスコース',
        'course_type': CourseType.CAPACITY_LIMITED,
        'duration_minutes': 60, 'capacity': 8,
        'price': 9000, 'is_monthly': True, 'sessions_per_month': 4,
        'description': '少人数制で丁寧な指導。心と体のバランスを整えるクラス',
    },
    {
        'name': 'パーソナルトレーニング',
        'course_type': CourseType.EXCLUSIVE,
        'duration_minutes': 60,
        'price': 8000, 'is_monthly': False,
        'description': '完全予約制の個別指導で、効率的なトレーニングを実現',
    },
]


class Command(BaseCommand):
    help = 'Seed the course catalog'

    def add_arguments(self, parser):
        parser.add_argument(
            '--flush', action='store_true',
            help='Delete courses that have no bookings before creating fresh records',
        )
        parser.add_argument(
            '--demo-member', action='store_true',
            help='Also create a demo member profile',
        )

    def handle(self, *args, **options):
        if options['flush']:
            self.stdout.write('Flushing unused courses...')
            Course.objects.filter(bookings__isnull=True).delete()

        self.stdout.write('Seeding courses...')
        for data in COURSES:
            data = dict(data)
            course, created = Course.objects.get_or_create(
                name=data.pop('name'), course_type=data.pop('course_type'),
                defaults=data,
            )
            course.full_clean()
            self.stdout.write(f"  {'created' if created else 'exists '} {course}")
        self.stdout.write(self.style.SUCCESS(f'  ✔ {len(COURSES)} courses ready'))

        if options['demo_member']:
            profile, _ = Profile.get_or_create_for_subject(
                auth_subject='demo-member', full_name='デモ 会員', email='demo@fitclub.test',
            )
            self.stdout.write(self.style.SUCCESS(f'  ✔ demo member {profile.id}'))
