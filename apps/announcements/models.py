from django.db import models
from core.constants import ANNOUNCEMENT_IMAGES_DIR
from core.utils import file_extension


def announcement_image_path(instance, filename):
    return f"{ANNOUNCEMENT_IMAGES_DIR}/{instance.pk}{file_extension(filename)}"


class Announcement(models.Model):
    title = models.CharField(max_length=200)
    content = models.TextField()
    is_active = models.BooleanField(default=True)
    image = models.ImageField(upload_to=announcement_image_path, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'announcements'
        ordering = ['-created_at']

    def __str__(self):
        return self.title
