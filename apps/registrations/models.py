from django.db import models
from apps.catalog.models import Category, Program
from core.utils import generate_customer_id


class Registration(models.Model):
    customer_id = models.CharField(max_length=20, unique=True, editable=False)
    full_name = models.CharField(max_length=200)
    mobile_number = models.CharField(max_length=15, db_index=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='registrations')
    program = models.ForeignKey(
        Program, on_delete=models.PROTECT, null=True, blank=True, related_name='registrations'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'registrations'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.customer_id} - {self.full_name}"

    def save(self, *args, **kwargs):
        if not self.customer_id:
            self.customer_id = generate_customer_id()
            while Registration.objects.filter(customer_id=self.customer_id).exists():
                self.customer_id = generate_customer_id()
        super().save(*args, **kwargs)
