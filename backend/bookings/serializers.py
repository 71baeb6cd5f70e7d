from rest_framework import serializers

from records.entities import BookingStatus


class BookingSerializer(serializers.Serializer):
    id                       = serializers.CharField(read_only=True)
    quotation_id             = serializers.CharField()
    customer_name            = serializers.CharField()
    pol                      = serializers.CharField()
    pod                      = serializers.CharField()
    equipment                = serializers.CharField()
    type                     = serializers.CharField()
    buy_rate                 = serializers.DecimalField(max_digits=12, decimal_places=2)
    sell_rate                = serializers.DecimalField(max_digits=12, decimal_places=2)
    profit_and_loss          = serializers.DecimalField(max_digits=12, decimal_places=2)
    status                   = serializers.CharField()
    selected_carrier_rate_id = serializers.CharField(allow_null=True)
    notes                    = serializers.CharField(allow_null=True)
    created_at               = serializers.DateTimeField()
    updated_at               = serializers.DateTimeField()


class BookingUpdateSerializer(serializers.Serializer):
    """Direct edits; route and sell rate stay as copied from the quotation."""
    status   = serializers.ChoiceField(choices=BookingStatus.CHOICES, required=False)
    buy_rate = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    notes    = serializers.CharField(allow_blank=True, allow_null=True, required=False)


class BookingDraftSerializer(serializers.Serializer):
    quotation_id             = serializers.CharField(read_only=True)
    customer_name            = serializers.CharField(read_only=True)
    pol                      = serializers.CharField(read_only=True)
    pod                      = serializers.CharField(read_only=True)
    equipment                = serializers.CharField(read_only=True)
    type                     = serializers.CharField(read_only=True)
    sell_rate                = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    buy_rate                 = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, allow_null=True, required=False)
    profit_and_loss          = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    selected_carrier_rate_id = serializers.CharField(read_only=True)
    status                   = serializers.ChoiceField(choices=BookingStatus.CHOICES, required=False)
    notes                    = serializers.CharField(allow_blank=True, allow_null=True, required=False)


class QuotationPickSerializer(serializers.Serializer):
    """Quotation as listed in the booking wizard's search results."""
    id            = serializers.CharField()
    customer_name = serializers.CharField()
    pol           = serializers.CharField()
    pod           = serializers.CharField()
    equipment     = serializers.CharField()
    type          = serializers.CharField()
    status        = serializers.CharField()
    sell_rate     = serializers.DecimalField(max_digits=12, decimal_places=2, allow_null=True)
