from rest_framework import serializers

from records.entities import FREIGHT_MODES, FREQUENCIES


class PortSerializer(serializers.Serializer):
    code = serializers.CharField()
    name = serializers.CharField()
    country = serializers.CharField()


class ScheduleRateSerializer(serializers.Serializer):
    id = serializers.CharField()
    carrier = serializers.CharField()
    origin = serializers.CharField()
    destination = serializers.CharField()
    voyage_details = serializers.CharField()
    buy_rate = serializers.DecimalField(max_digits=12, decimal_places=2)
    allocation = serializers.IntegerField()


class BuyRateSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    carrier = serializers.CharField(max_length=50)
    pol = serializers.CharField(max_length=50)
    pod = serializers.CharField(max_length=50)
    commodity = serializers.CharField(max_length=50)
    freight_mode_type = serializers.ChoiceField(choices=FREIGHT_MODES)
    equipment = serializers.CharField(max_length=20)
    weight_capacity = serializers.CharField(max_length=20)
    min_booking = serializers.CharField(max_length=20)
    rate = serializers.DecimalField(max_digits=12, decimal_places=2)
    valid_from = serializers.DateField()
    valid_to = serializers.DateField()


class ScheduleSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    carrier = serializers.CharField(max_length=50)
    origin = serializers.CharField(max_length=50)
    destination = serializers.CharField(max_length=50)
    service_route = serializers.CharField(max_length=50)
    allocation = serializers.IntegerField()
    etd = serializers.DateTimeField()
    eta = serializers.DateTimeField()
    frequency = serializers.ChoiceField(choices=FREQUENCIES, default="Weekly")
