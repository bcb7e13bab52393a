from rest_framework import mixins, permissions, viewsets
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from accounts.permissions import IsHostOrAdmin

from .models import Property
from .serializers import PropertySerializer


class PropertyPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100

    def get_paginated_response(self, data):
        return Response(
            {
                "items": data,
                "total": self.page.paginator.count,
                "page": self.page.number,
                "limit": self.get_page_size(self.request),
            }
        )


class PropertyViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Public property directory; hosts and admins may add listings."""

    serializer_class = PropertySerializer
    pagination_class = PropertyPagination
    filterset_fields = ["status"]
    search_fields = ["title", "city"]
    ordering_fields = ["created_at", "nightly_price"]

    def get_permissions(self):
        if self.action == "create":
            return [permissions.IsAuthenticated(), IsHostOrAdmin()]
        return [permissions.AllowAny()]

    def get_queryset(self):
        queryset = Property.objects.select_related("host").order_by("-created_at")
        if self.action != "list":
            return queryset

        params = self.request.query_params
        city = params.get("city", "").strip()
        if city:
            queryset = queryset.filter(city__icontains=city)
        if "status" not in params:
            queryset = queryset.filter(status=Property.ACTIVE)
        return queryset

    def perform_create(self, serializer):
        serializer.save(host=self.request.user)
