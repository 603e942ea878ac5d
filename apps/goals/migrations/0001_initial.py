from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('projects', '0001_initial'),
        ('tasks', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Objective',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('period', models.CharField(blank=True, help_text="Np. 'Q3 2026'", max_length=50)),
                ('deadline', models.DateField(blank=True, null=True)),
                ('progress', models.PositiveSmallIntegerField(default=0, help_text='Postęp w procentach (0-100)', validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('progress_source', models.CharField(choices=[('MANUAL', 'Ręcznie'), ('KEY_RESULTS', 'Kluczowe rezultaty'), ('SUB_OBJECTIVES', 'Cele podrzędne'), ('PROJECTS', 'Projekty')], default='KEY_RESULTS', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parent', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='children', to='goals.objective')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='objectives', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['deadline', 'id'],
            },
        ),
        migrations.CreateModel(
            name='KeyResult',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('start_value', models.FloatField(default=0)),
                ('current_value', models.FloatField(default=0)),
                ('target_value', models.FloatField()),
                ('unit', models.CharField(blank=True, max_length=30)),
                ('format', models.CharField(choices=[('NUMBER', 'Liczba'), ('PERCENTAGE', 'Procent'), ('CURRENCY', 'Waluta'), ('BOOLEAN', 'Tak/Nie')], default='NUMBER', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('objective', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='key_results', to='goals.objective')),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='KeyResultUpdate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('previous_value', models.FloatField()),
                ('new_value', models.FloatField()),
                ('note', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('author', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='key_result_updates', to=settings.AUTH_USER_MODEL)),
                ('key_result', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='updates', to='goals.keyresult')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='ObjectiveProject',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('objective', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='project_links', to='goals.objective')),
                ('project', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='objective_links', to='projects.project')),
            ],
            options={
                'unique_together': {('objective', 'project')},
            },
        ),
        migrations.CreateModel(
            name='ObjectiveTask',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('objective', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='task_links', to='goals.objective')),
                ('task', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='objective_links', to='tasks.task')),
            ],
            options={
                'unique_together': {('objective', 'task')},
            },
        ),
        migrations.CreateModel(
            name='KeyResultTask',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('key_result', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='task_links', to='goals.keyresult')),
                ('task', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='key_result_links', to='tasks.task')),
            ],
            options={
                'unique_together': {('key_result', 'task')},
            },
        ),
    ]
