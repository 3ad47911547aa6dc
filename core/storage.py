import logging
from django.db import transaction

logger = logging.getLogger(__name__)


def attach_file(instance, field_name, upload):
    """
    Store ``upload`` in ``instance.<field_name>`` and save the reference.

    The file write and the row write are treated as one operation: if saving
    the row fails, the freshly stored file is deleted again and the error is
    re-raised. Once the surrounding transaction commits, the file previously
    referenced by the field is removed, so re-uploading replaces the old asset.
    """
    field_file = getattr(instance, field_name)
    storage = field_file.storage
    previous_name = field_file.name

    field_file.save(upload.name, upload, save=False)
    stored_name = field_file.name
    logger.info(f"Stored {stored_name} for {instance.__class__.__name__} {instance.pk}")

    try:
        with transaction.atomic():
            instance.save(update_fields=[field_name])
    except Exception as e:
        logger.error(f"Failed to save {field_name} reference for {instance.__class__.__name__} {instance.pk}: {str(e)}")
        storage.delete(stored_name)
        setattr(instance, field_name, previous_name)
        raise

    if previous_name and previous_name != stored_name:
        transaction.on_commit(lambda: storage.delete(previous_name))
    return field_file.url


def remove_file(instance, field_name):
    """Delete the stored file referenced by ``instance.<field_name>`` once the transaction commits."""
    field_file = getattr(instance, field_name)
    if field_file and field_file.name:
        storage, name = field_file.storage, field_file.name
        transaction.on_commit(lambda: storage.delete(name))
