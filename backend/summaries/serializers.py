from rest_framework import serializers

from records.entities import SHIPMENT_TYPES


class SummaryRequestSerializer(serializers.Serializer):
    customer_name = serializers.CharField(allow_blank=True, required=False)
    pol = serializers.CharField(allow_blank=True, required=False)
    pod = serializers.CharField(allow_blank=True, required=False)
    equipment = serializers.CharField(allow_blank=True, required=False)
    volume = serializers.CharField(allow_blank=True, allow_null=True, required=False)
    type = serializers.ChoiceField(choices=SHIPMENT_TYPES, required=False)
