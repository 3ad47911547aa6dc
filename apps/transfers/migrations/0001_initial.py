from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('registrations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='JobTransferRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_id', models.CharField(max_length=20)),
                ('full_name', models.CharField(max_length=200)),
                ('mobile_number', models.CharField(max_length=15)),
                ('reason', models.TextField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('requested_at', models.DateTimeField(auto_now_add=True)),
                ('processed_at', models.DateTimeField(blank=True, null=True)),
                ('processed_by', models.CharField(blank=True, max_length=150, null=True)),
                ('from_program', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transfers_out', to='catalog.program')),
                ('registration', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transfer_requests', to='registrations.registration')),
                ('to_program', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transfers_in', to='catalog.program')),
            ],
            options={
                'db_table': 'job_transfer_requests',
                'ordering': ['-requested_at'],
            },
        ),
        migrations.AddConstraint(
            model_name='jobtransferrequest',
            constraint=models.UniqueConstraint(condition=models.Q(('status', 'pending')), fields=('registration',), name='unique_pending_transfer_per_registration'),
        ),
    ]
