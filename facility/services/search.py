from typing import Iterable

from django.db.models import Q, QuerySet


def search(qs: QuerySet, term: str, lookups: Iterable[str]) -> QuerySet:
    """Case-insensitive substring match of ``term`` against any of ``lookups``.

    Lookups may traverse relations (``department__name``); the result is
    de-duplicated when they do.
    """
    term = (term or '').strip()
    if not term:
        return qs
    cond = Q()
    joins = False
    for lookup in lookups:
        cond |= Q(**{f'{lookup}__icontains': term})
        joins = joins or '__' in lookup
    qs = qs.filter(cond)
    return qs.distinct() if joins else qs


def paginate(qs: QuerySet, page=None, page_size=None) -> QuerySet:
    if not page_size:
        return qs
    page = page or 1
    start = (page - 1) * page_size
    return qs[start:start + page_size]
