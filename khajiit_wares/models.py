from django.db import IntegrityError, models, transaction


class ProcessedItem(models.Model):
    """Keys of source items that have already been captioned."""

    key = models.CharField(max_length=255, primary_key=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "state"

    def __str__(self) -> str:
        return self.key

    @classmethod
    def insert(cls, key: str) -> bool:
        """Add *key* to the set; return False if it was already present."""
        try:
            with transaction.atomic():
                cls.objects.create(key=str(key))
        except IntegrityError:
            return False
        return True
