from django.http import JsonResponse
from django.views.decorators.http import require_GET

from .models import Course


def course_payload(course: Course) -> dict:
    return {
        'id': str(course.id),
        'name': course.name,
        'description': course.description,
        'course_type': course.course_type,
        'duration_minutes': course.duration_minutes,
        'capacity': course.capacity,
        'price': int(course.price),
        'is_monthly': course.is_monthly,
        'sessions_per_month': course.sessions_per_month,
        'price_display': course.price_display,
        'duration_display': course.duration_display,
    }


@require_GET
def course_list(request):
    """Catalog of bookable courses."""
    courses = Course.objects.active().order_by('course_type', 'name')
    return JsonResponse({'courses': [course_payload(c) for c in courses]})
