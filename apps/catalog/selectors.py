"""
Cached read side of the public catalog.

Screens read categories and programs through these helpers instead of
querying the tables directly; ``apps.catalog.signals`` clears the cache on
every catalog write so the next read reflects the stored state.
"""
import logging
from django.conf import settings
from django.core.cache import cache
from .models import Category, Program

logger = logging.getLogger(__name__)

CATALOG_VERSION_KEY = 'catalog:version'


def _cache_key(name):
    version = cache.get(CATALOG_VERSION_KEY)
    if version is None:
        version = 1
        cache.set(CATALOG_VERSION_KEY, version, None)
    return f"catalog:{version}:{name}"


def invalidate_catalog_cache():
    """Bump the catalog version so every cached read is recomputed."""
    try:
        cache.incr(CATALOG_VERSION_KEY)
    except ValueError:
        cache.set(CATALOG_VERSION_KEY, 2, None)
    logger.info("Invalidated public catalog cache")


def _cached(name, loader):
    key = _cache_key(name)
    rows = cache.get(key)
    if rows is None:
        rows = loader()
        cache.set(key, rows, settings.CATALOG_CACHE_TIMEOUT)
    return rows


def get_public_categories():
    """All categories, active or not, ordered by English name."""
    return _cached('categories', lambda: list(Category.objects.order_by('name_english')))


def get_selectable_categories():
    """Active categories offered on the job selection page."""
    return _cached('selectable', lambda: list(
        Category.objects.filter(is_active=True)
        .exclude(name_english__in=settings.HIDDEN_CATEGORY_NAMES)
        .order_by('name_english')
    ))


def get_category_programs(category_id):
    """Active programs of one category, featured first then by priority."""
    return _cached(f'programs:{category_id}', lambda: list(
        Program.objects.filter(category_id=category_id, is_active=True)
        .select_related('sub_category')
        .order_by('-is_top', '-priority', 'name')
    ))
