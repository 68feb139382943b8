"""
Management command to print a personalised advisory for a coordinate.
"""
import json

from django.core.management.base import BaseCommand, CommandError

from apps.api.orchestrator import AdvisoryOrchestrator
from apps.core.exceptions import AdvisoryError
from apps.core.types import (
    CardiovascularCondition,
    HealthProfile,
    OtherCondition,
    RespiratoryCondition,
)

TIME_OF_DAY_CHOICES = ['morning', 'afternoon', 'evening', 'night']


def split_conditions(codes):
    """Sort free-form condition codes into respiratory, cardiovascular and other."""
    respiratory, cardiovascular, other = [], [], []
    respiratory_codes = {c.value for c in RespiratoryCondition}
    cardiovascular_codes = {c.value for c in CardiovascularCondition}

    for code in codes:
        normalised = code.strip().lower()
        if normalised in respiratory_codes:
            respiratory.append(normalised)
        elif normalised in cardiovascular_codes:
            cardiovascular.append(normalised)
        else:
            # Unknown codes land here and are rejected by OtherCondition parsing
            other.append(normalised)

    return respiratory, cardiovascular, other


class Command(BaseCommand):
    help = 'Resolve the air quality at a coordinate and print a personalised health advisory'

    def add_arguments(self, parser):
        parser.add_argument('--lat', type=float, required=True)
        parser.add_argument('--lon', type=float, required=True)
        parser.add_argument('--age', type=int, default=30)
        parser.add_argument('--gender', default='')
        parser.add_argument(
            '--condition', action='append', default=[],
            help='Condition code; repeatable. One of: ' + ', '.join(
                c.value for group in (RespiratoryCondition, CardiovascularCondition, OtherCondition)
                for c in group
            ),
        )
        parser.add_argument('--symptom', action='append', default=[], help='Symptom code; repeatable')
        parser.add_argument('--outdoor-hours', type=float, default=0)
        parser.add_argument('--activity-level', default='moderate')
        parser.add_argument('--time-of-day', choices=TIME_OF_DAY_CHOICES)
        parser.add_argument('--insight', action='store_true', help='Request a narrative insight')
        parser.add_argument('--refresh', action='store_true', help='Bypass the reading cache')
        parser.add_argument('--json', action='store_true', help='Print the raw JSON payload')

    def handle(self, *args, **options):
        respiratory, cardiovascular, other = split_conditions(options['condition'])

        try:
            profile = HealthProfile.from_codes(
                age=options['age'],
                gender=options['gender'],
                respiratory=respiratory,
                cardiovascular=cardiovascular,
                other=other,
                symptoms=options['symptom'],
                outdoor_hours_per_day=options['outdoor_hours'],
                activity_level=options['activity_level'],
            )
            result = self.get_orchestrator().get_advisory(
                options['lat'],
                options['lon'],
                profile,
                time_of_day=options['time_of_day'],
                include_insight=options['insight'],
                use_cache=not options['refresh'],
            )
        except AdvisoryError as e:
            raise CommandError(str(e))

        if options['json']:
            self.stdout.write(json.dumps(result, indent=2))
            return

        self.print_result(result)

    def get_orchestrator(self):
        return AdvisoryOrchestrator()

    def print_result(self, result):
        location = result['location']
        current = result['current']
        advisory = result['advisory']
        risk = advisory['risk']

        if location.get('warning'):
            self.stdout.write(self.style.WARNING(location['warning']))

        self.stdout.write(
            f"AQI {current['aqi']} ({current['category']}) at {current['station']}, "
            f"{current['distance_km']} km away [{current['source']}]"
        )
        self.stdout.write(f"Dominant pollutant: {current['dominant_pollutant']}")

        style = self.style.ERROR if risk['level'] in ('Very High', 'Severe') else self.style.SUCCESS
        self.stdout.write(style(f"\nRisk: {risk['level']} ({risk['score']}/100)"))
        self.stdout.write(risk['summary'])

        for warning in advisory['warnings']:
            self.stdout.write(self.style.ERROR(f"\n{warning}"))

        if advisory['health_impacts']:
            self.stdout.write('\nHealth impacts:')
            for impact in advisory['health_impacts']:
                self.stdout.write(f"  - {impact}")

        self.stdout.write('\nRecommendations:')
        for rec in advisory['recommendations']:
            self.stdout.write(f"  {rec['icon']} {rec['title']}: {rec['text']}")

        self.stdout.write(f"\nActivity plan: {advisory['activity_plan']}")

        if advisory.get('insight'):
            self.stdout.write(f"\nInsight: {advisory['insight']}")
