from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
from .models import Category, SubCategory, Program
from .selectors import invalidate_catalog_cache

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Category)
@receiver(post_delete, sender=Category)
@receiver(post_save, sender=SubCategory)
@receiver(post_delete, sender=SubCategory)
@receiver(post_save, sender=Program)
@receiver(post_delete, sender=Program)
def invalidate_catalog(sender, instance, **kwargs):
    """Drop cached catalog reads whenever a category, subcategory or program changes."""
    try:
        invalidate_catalog_cache()
    except Exception as e:
        logger.error(f"Error invalidating catalog cache for {sender.__name__} {instance.pk}: {str(e)}")
