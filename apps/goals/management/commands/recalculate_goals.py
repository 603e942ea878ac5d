from django.core.management.base import BaseCommand
from apps.goals.domain.entities import ProgressSource
from apps.goals.models import Objective
from apps.goals.services.progress_service import get_progress_service


class Command(BaseCommand):
    help = 'Przelicza postęp celów (domyślnie od wszystkich liści w górę)'

    def add_arguments(self, parser):
        parser.add_argument('objective_ids', nargs='*', type=int)
        parser.add_argument('--task', type=int, help="Cele zależne od zadania")
        parser.add_argument('--project', type=int, help="Cele podpięte do projektu")

    def handle(self, *args, **options):
        service = get_progress_service()

        if options['task'] is not None:
            ids = service.objectives_for_task(options['task'])
        elif options['project'] is not None:
            ids = service.objectives_for_project(options['project'])
        elif options['objective_ids']:
            ids = options['objective_ids']
        else:
            # Liście automatyczne przeliczają swoich przodków; cel MANUAL
            # nie propaguje, więc zamiast niego startujemy od jego rodzica
            manual = ProgressSource.MANUAL.value
            leaves = Objective.objects.filter(children__isnull=True).exclude(progress_source=manual)
            parents_of_manual = Objective.objects.filter(progress_source=manual, parent__isnull=False)

            ids = list(leaves.order_by('id').values_list('id', flat=True))
            ids += parents_of_manual.order_by('parent_id').values_list('parent_id', flat=True)
            ids = list(dict.fromkeys(ids))

        done = service.recalculate_many(ids)
        failed = [i for i in dict.fromkeys(ids) if i not in done]

        self.stdout.write(self.style.SUCCESS(f'Przeliczono {len(done)} celów.'))
        for objective_id in failed:
            self.stdout.write(self.style.WARNING(f"- cel {objective_id}: błąd (szczegóły w logu)"))
