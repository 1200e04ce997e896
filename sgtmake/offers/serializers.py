from rest_framework import serializers
from .models import BestDeal, HeroBanner, MarqueeOffer


class BestDealSerializer(serializers.ModelSerializer):
    class Meta:
        model = BestDeal
        fields = ['id', 'title', 'description', 'price', 'url', 'image_public_id', 'created_at', 'updated_at']


class HeroBannerSerializer(serializers.ModelSerializer):
    class Meta:
        model = HeroBanner
        fields = [
            'id', 'title', 'description', 'base_price', 'offer_price', 'url',
            'image_public_id', 'image_public_id_sm', 'created_at', 'updated_at',
        ]


class MarqueeOfferSerializer(serializers.ModelSerializer):
    class Meta:
        model = MarqueeOffer
        fields = ['id', 'title', 'created_at']


class BestDealValuesSerializer(serializers.Serializer):
    """Form values of the best deal dialog; `id` and `slug` identify the linked product"""
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    slug = serializers.SlugField()
    id = serializers.CharField()

    def store_url(self):
        return f"/store/{self.validated_data['slug']}?pid={self.validated_data['id']}"


class HeroBannerValuesSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    basePrice = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    offerPrice = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    url = serializers.CharField(max_length=500)

    def model_values(self):
        data = self.validated_data
        return {
            'title': data['title'],
            'description': data['description'],
            'base_price': data['basePrice'],
            'offer_price': data['offerPrice'],
            'url': data['url'],
        }
