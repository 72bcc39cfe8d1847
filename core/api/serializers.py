from rest_framework import serializers


class CommandRecordSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True, allow_null=True)
    name = serializers.CharField(max_length=100)
    status = serializers.CharField(max_length=50)
    ip = serializers.CharField(read_only=True)
    date = serializers.CharField(read_only=True)
