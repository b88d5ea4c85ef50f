# clinicpay/urls.py
from rest_framework.decorators import (
    api_view,
    authentication_classes,
    permission_classes,
)
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from django.urls import include, path
from django.utils import timezone


@api_view(["GET"])
@permission_classes([AllowAny])
@authentication_classes([])
def health_check(request):
    """Public health check endpoint"""
    return Response(
        {
            "status": "online",
            "message": "Payroll engine is available",
            "version": "1.0",
            "timestamp": timezone.now().isoformat(),
        }
    )


@api_view(["GET"])
@permission_classes([AllowAny])
@authentication_classes([])
def api_root(request):
    """API root endpoint showing available endpoints"""
    return Response(
        {
            "message": "ClinicPay API",
            "version": "1.0",
            "api_versions": {"current": "v1", "supported": ["v1"], "deprecated": []},
            "endpoints": {
                "health": request.build_absolute_uri("/api/v1/health/"),
                "staff_calculate": request.build_absolute_uri(
                    "/api/v1/payroll/staff/calculate/"
                ),
                "staff_calculate_bulk": request.build_absolute_uri(
                    "/api/v1/payroll/staff/calculate-bulk/"
                ),
                "physician_calculate": request.build_absolute_uri(
                    "/api/v1/payroll/physicians/calculate/"
                ),
                "standard_hours": request.build_absolute_uri(
                    "/api/v1/payroll/standard-hours/"
                ),
            },
        }
    )


urlpatterns = [
    path("api/v1/", api_root, name="api-v1-root"),
    path("api/v1/health/", health_check, name="health-check"),
    path("api/v1/payroll/", include("payroll.urls")),
]
