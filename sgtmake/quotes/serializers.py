from rest_framework import serializers
from .models import QuoteRequest


class QuoteItemSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=QuoteRequest.ITEM_TYPES)
    categoryId = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    categoryName = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    title = serializers.CharField()
    quantity = serializers.IntegerField(min_value=1)
    specifications = serializers.DictField(required=False, default=dict)
    image = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class QuoteCreateSerializer(serializers.ModelSerializer):
    items = QuoteItemSerializer(many=True)

    class Meta:
        model = QuoteRequest
        fields = ['id', 'items', 'notes', 'total_items', 'status', 'created_at']
        read_only_fields = ['total_items', 'status', 'created_at']

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError("At least one item is required.")
        return value

    def create(self, validated_data):
        items = [dict(item) for item in validated_data.pop('items')]
        return QuoteRequest.objects.create(
            items=items,
            total_items=QuoteRequest.count_items(items),
            **validated_data
        )


class QuoteListSerializer(serializers.ModelSerializer):
    user_name = serializers.SerializerMethodField()
    user_email = serializers.SerializerMethodField()

    class Meta:
        model = QuoteRequest
        fields = [
            'id', 'user', 'user_name', 'user_email', 'total_items', 'status', 'quoted_price',
            'email_sent', 'response_received', 'valid_until', 'created_at',
        ]

    def get_user_name(self, obj):
        return obj.user.display_name if obj.user else None

    def get_user_email(self, obj):
        return obj.user.email if obj.user else None


class QuoteDetailSerializer(QuoteListSerializer):
    user_phone = serializers.SerializerMethodField()

    class Meta(QuoteListSerializer.Meta):
        fields = QuoteListSerializer.Meta.fields + [
            'user_phone', 'items', 'notes', 'admin_response', 'email_opened', 'updated_at',
        ]

    def get_user_phone(self, obj):
        return obj.user.phone if obj.user else None


class QuoteResponseSerializer(serializers.Serializer):
    """Body of the admin's price response"""
    quotedPrice = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    adminResponse = serializers.CharField()
    status = serializers.CharField()

    def validate_status(self, value):
        value = value.strip().lower()
        if value not in dict(QuoteRequest.STATUS_CHOICES):
            raise serializers.ValidationError("Invalid status")
        return value
