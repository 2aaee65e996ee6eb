import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Page',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('namespace', models.IntegerField(default=0)),
                ('title', models.CharField(max_length=255)),
                ('text', models.TextField(blank=True)),
                (
                    'content_model',
                    models.CharField(
                        choices=[
                            ('wikitext', 'Wikitext'),
                            ('flow-board', 'Discussion board'),
                            ('flow-topic', 'Discussion topic'),
                        ],
                        default='wikitext',
                        max_length=32,
                    ),
                ),
                ('touched', models.DateTimeField(auto_now=True)),
            ],
            options={
                'unique_together': {('namespace', 'title')},
            },
        ),
        migrations.CreateModel(
            name='Topic',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=255, unique=True)),
                ('owner', models.CharField(db_index=True, max_length=255)),
                ('subject', models.CharField(max_length=260)),
                ('summary', models.TextField(blank=True)),
                ('creator', models.CharField(blank=True, max_length=255)),
                ('locked', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('modified_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['created_at', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='Post',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('author', models.CharField(max_length=255)),
                ('content', models.TextField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('edited_at', models.DateTimeField(auto_now=True)),
                (
                    'reply_to',
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name='replies',
                        to='semantic_discussions.post',
                    ),
                ),
                (
                    'topic',
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name='posts',
                        to='semantic_discussions.topic',
                    ),
                ),
            ],
            options={
                'ordering': ['created_at', 'pk'],
            },
        ),
        migrations.CreateModel(
            name='SemanticFact',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('subject', models.CharField(db_index=True, max_length=255)),
                ('property', models.CharField(db_index=True, max_length=255)),
                ('value_type', models.CharField(max_length=8)),
                ('value', models.TextField()),
                ('position', models.PositiveIntegerField(default=0)),
            ],
            options={
                'ordering': ['subject', 'position'],
            },
        ),
        migrations.CreateModel(
            name='UpdateJob',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('page', models.CharField(max_length=255)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['created_at', 'pk'],
            },
        ),
    ]
