from rest_framework import serializers
from .models import PartCategory, PartOption


class PartOptionSerializer(serializers.ModelSerializer):
    type = serializers.ChoiceField(source='input_type', choices=PartOption.TYPE_CHOICES, required=False, default='select')

    class Meta:
        model = PartOption
        fields = ['id', 'category', 'name', 'label', 'type', 'required', 'help_text', 'values', 'created_at']
        read_only_fields = ['category', 'created_at']

    def validate_values(self, value):
        if value is None:
            return []
        if not isinstance(value, list):
            raise serializers.ValidationError("Values must be a list.")
        for entry in value:
            if not isinstance(entry, dict) or not str(entry.get('value', '')).strip():
                raise serializers.ValidationError("Each value needs a non-empty 'value'.")
        return value


class PartCategorySerializer(serializers.ModelSerializer):
    options = PartOptionSerializer(many=True, read_only=True)

    class Meta:
        model = PartCategory
        fields = ['id', 'kind', 'name', 'description', 'image', 'is_active', 'options', 'created_at', 'updated_at']
        read_only_fields = ['kind', 'image', 'created_at', 'updated_at']


def option_payload(data):
    """Accept camelCase keys sent by the dashboard forms"""
    payload = {}
    for key in ('name', 'label', 'type', 'required', 'values'):
        if key in data:
            payload[key] = data[key]
    if 'helpText' in data or 'help_text' in data:
        payload['help_text'] = data.get('helpText', data.get('help_text'))
    return payload
