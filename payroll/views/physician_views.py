"""
Physician calculation view for payroll module.
"""

import logging

from rest_framework import status
from rest_framework.decorators import (
    api_view,
    authentication_classes,
    permission_classes,
)
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from django.conf import settings

from core.exceptions import PayrollConfigurationAPIError

from ..serializers import PhysicianCalculationSerializer, build_physician_inputs
from ..services.contracts import PayrollConfigurationError
from ..services.payroll_utils import ppf_target_month
from ..services.physician import PhysicianIncentiveCalculator

logger = logging.getLogger(__name__)


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def calculate_physician_payroll(request):
    """
    Calculate a physician's pay for the billing month in the request.

    The performance figures are those of the settled period, two months
    before the billing month; the response names that period.
    """
    serializer = PhysicianCalculationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        config, performance, shifts = build_physician_inputs(data)
        calculator = PhysicianIncentiveCalculator(
            default_nhi_rate=settings.PAYROLL_DEFAULT_NHI_RATE
        )
        result = calculator.calculate(
            performance,
            config,
            actual_hours=data.get("actual_hours"),
            shifts=shifts,
        )
    except PayrollConfigurationError as e:
        raise PayrollConfigurationAPIError(e.safe_message, e.field_name)

    target_year, target_month = ppf_target_month(data["year"], data["month"])
    body = result.to_dict()
    body.update(
        {
            "year": data["year"],
            "month": data["month"],
            "performance_period": f"{target_year}-{target_month:02d}",
        }
    )
    return Response(body, status=status.HTTP_200_OK)
