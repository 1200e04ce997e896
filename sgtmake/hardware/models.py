from django.db import models


class PartCategory(models.Model):
    """Configurable hardware category (fastener, connector or wire) customers request quotes for"""
    KIND_CHOICES = [
        ('fastener', 'Fastener'),
        ('connector', 'Connector'),
        ('wire', 'Wire'),
    ]

    kind = models.CharField(max_length=20, choices=KIND_CHOICES, db_index=True)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, null=True)
    image = models.CharField(max_length=500, blank=True, null=True, help_text="Cloudinary public id")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.get_kind_display()})"

    @property
    def image_folder(self):
        return f"{self.kind}-categories"

    class Meta:
        db_table = 'part_categories'
        verbose_name_plural = 'part categories'
        ordering = ['-created_at']


class PartOption(models.Model):
    """A configurable specification of a part category (e.g. thread size, gauge)"""
    TYPE_CHOICES = [
        ('select', 'Select'),
        ('multiselect', 'Multi Select'),
        ('text', 'Text'),
        ('number', 'Number'),
    ]

    category = models.ForeignKey(PartCategory, on_delete=models.CASCADE, related_name='options')
    name = models.CharField(max_length=100)
    label = models.CharField(max_length=200)
    input_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='select')
    required = models.BooleanField(default=False)
    help_text = models.TextField(blank=True, null=True)
    # [{"value": "M6", "image": "<url>", "publicId": "<cloudinary id>"}]
    values = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.category.name} - {self.label}"

    def image_public_ids(self):
        return [
            value['publicId'] for value in self.values or []
            if isinstance(value, dict) and value.get('image') and value.get('publicId')
        ]

    class Meta:
        db_table = 'part_options'
        ordering = ['created_at']
