from __future__ import annotations

from rest_framework import serializers

from records.entities import SHIPMENT_TYPES, QuotationStatus


class QuotationSerializer(serializers.Serializer):
    id              = serializers.CharField(read_only=True)
    customer_name   = serializers.CharField()
    pol             = serializers.CharField()
    pod             = serializers.CharField()
    equipment       = serializers.CharField()
    type            = serializers.CharField()
    status          = serializers.CharField()
    buy_rate        = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    sell_rate       = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
    profit_and_loss = serializers.DecimalField(max_digits=12, decimal_places=2)
    selected_rate_id = serializers.CharField(allow_null=True)
    notes           = serializers.CharField(allow_null=True)
    created_at      = serializers.DateTimeField()
    updated_at      = serializers.DateTimeField()


# ---------- WRITE SERIALIZERS (shape only; business rules live in the store/lifecycle) ----------
class QuotationUpdateSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=200, required=False)
    pol           = serializers.CharField(max_length=50, required=False)
    pod           = serializers.CharField(max_length=50, required=False)
    equipment     = serializers.CharField(max_length=50, required=False)
    type          = serializers.ChoiceField(choices=SHIPMENT_TYPES, required=False)
    status        = serializers.ChoiceField(choices=QuotationStatus.CHOICES, required=False)
    buy_rate      = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, allow_null=True, required=False)
    sell_rate     = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, allow_null=True, required=False)
    notes         = serializers.CharField(allow_blank=True, allow_null=True, required=False)


class QuotationDraftSerializer(QuotationUpdateSerializer):
    """Wizard draft: the editable quotation fields plus the summary volume; P&L is read-only."""
    customer_name    = serializers.CharField(max_length=200, allow_blank=True, required=False)
    pol              = serializers.CharField(max_length=50, allow_blank=True, required=False)
    pod              = serializers.CharField(max_length=50, allow_blank=True, required=False)
    equipment        = serializers.CharField(max_length=50, allow_blank=True, required=False)
    volume           = serializers.CharField(max_length=50, allow_blank=True, allow_null=True, required=False)
    selected_rate_id = serializers.CharField(read_only=True)
    profit_and_loss  = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
