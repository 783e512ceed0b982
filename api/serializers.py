from rest_framework import serializers


class ScriptureRefSerializer(serializers.Serializer):
    reference = serializers.CharField(allow_blank=True, required=False, default="")
    text = serializers.CharField(allow_blank=True, required=False, default="")


class ChatRequestSerializer(serializers.Serializer):
    theme = serializers.CharField(allow_blank=True, required=False, default="")
    scripture = ScriptureRefSerializer(required=False)
    message = serializers.CharField(allow_blank=True, required=False, default="", trim_whitespace=True)


class ChatResponseSerializer(serializers.Serializer):
    reply = serializers.CharField()
    audio = serializers.CharField(required=False, help_text="MP3 encodé en base64")


class ScriptureSerializer(serializers.Serializer):
    # On expose exactement les clés attendues par l'app
    reference = serializers.CharField()
    versions = serializers.DictField(child=serializers.CharField())
    expandedReference = serializers.CharField(required=False)
    expandedVersions = serializers.DictField(child=serializers.CharField(), required=False)


class ThemeSerializer(serializers.Serializer):
    theme = serializers.CharField(allow_blank=True, max_length=200, trim_whitespace=True)
