# shared/api_markers.py
"""
API 문서화용 마커 클래스들

@extend_schema 에서 쓰는 요청 본문 없는/공통 응답 시리얼라이저.
"""
from rest_framework import serializers


class EmptySerializer(serializers.Serializer):
    """
    본문이 없는 요청에 쓰는 더미 시리얼라이저

    사용 예시:
    @extend_schema(request=EmptySerializer, responses={200: SomeResponseSerializer})
    """
    pass


class DetailResponseSerializer(serializers.Serializer):
    """에러 응답 공통 형태: {"detail": "..."}"""
    detail = serializers.CharField()
