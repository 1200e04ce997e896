from django.db import models


class BestDeal(models.Model):
    """Featured product deal shown on the storefront"""
    title = models.CharField(max_length=200)
    description = models.TextField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    url = models.CharField(max_length=500, help_text="Storefront link, /store/<slug>?pid=<product id>")
    image_public_id = models.CharField(max_length=500)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'best_deals'
        ordering = ['-created_at']

    def __str__(self):
        return self.title


class HeroBanner(models.Model):
    title = models.CharField(max_length=200)
    description = models.TextField()
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    offer_price = models.DecimalField(max_digits=10, decimal_places=2)
    url = models.CharField(max_length=500)
    image_public_id = models.CharField(max_length=500)
    image_public_id_sm = models.CharField(max_length=500, help_text="Small-screen variant")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'hero_banners'
        ordering = ['-created_at']

    def __str__(self):
        return self.title


class MarqueeOffer(models.Model):
    title = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'marquee_offers'
        ordering = ['created_at']

    def __str__(self):
        return self.title
