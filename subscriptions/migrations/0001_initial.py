from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SubscriptionDocument",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("collection", models.CharField(db_index=True, max_length=100)),
                ("document_id", models.CharField(max_length=254)),
                ("data", models.JSONField(default=dict)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "subscription_documents",
                "ordering": ["collection", "document_id"],
            },
        ),
        migrations.AddConstraint(
            model_name="subscriptiondocument",
            constraint=models.UniqueConstraint(
                fields=("collection", "document_id"),
                name="unique_subscription_document",
            ),
        ),
    ]
