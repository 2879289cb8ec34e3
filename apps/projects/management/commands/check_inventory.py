from collections import Counter

import structlog
from django.core.management.base import BaseCommand, CommandError

from apps.core.uow import DjangoHousingUnitOfWork

logger = structlog.get_logger(__name__)


class Command(BaseCommand):
    help = 'Compares the committed units of every room with the applicants holding a unit'

    def add_arguments(self, parser):
        parser.add_argument(
            '--project',
            help='Only check this project',
        )

    def handle(self, *args, **options):
        with DjangoHousingUnitOfWork() as uow:
            if options['project']:
                projects = [uow.projects.get(options['project'])]
            else:
                projects = uow.projects.list()

            holders = Counter(
                (applicant.applied_project.casefold(), applicant.chosen_room_type)
                for applicant in uow.applicants.list()
                if applicant.holds_unit
            )

        mismatches = 0
        for project in projects:
            for room in project.rooms:
                held = holders[(project.identity, room.room_type)]
                line = (
                    f"{project.name} / {room.room_type.value}: "
                    f"{room.available_units}/{room.total_units} available, "
                    f"{room.committed_units} committed, {held} held by applicants"
                )
                if held == room.committed_units:
                    self.stdout.write(line)
                    continue

                mismatches += 1
                self.stdout.write(self.style.WARNING(line))
                logger.warning(
                    'inventory_mismatch',
                    project=project.name,
                    room_type=room.room_type.value,
                    committed=room.committed_units,
                    held=held,
                )

        if mismatches:
            raise CommandError(f"{mismatches} room type(s) out of balance")

        logger.info('inventory_consistent', projects=len(projects))
        self.stdout.write(self.style.SUCCESS('Inventory is consistent'))
