"""
Staff calculation views for payroll module.

Contains endpoints for:
- Single-worker monthly calculation
- Multi-worker (bulk) monthly calculation
- Monthly standard-hours helper
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

from core.exceptions import PayrollConfigurationAPIError

from ..serializers import (
    BulkStaffCalculationSerializer,
    StaffCalculationSerializer,
    StandardHoursQuerySerializer,
    build_calculation_context,
)
from ..services import PayrollService, payroll_rules_from_settings
from ..services.contracts import PayrollConfigurationError
from ..services.payroll_utils import monthly_standard_hours

logger = logging.getLogger(__name__)


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def calculate_staff_payroll(request):
    """
    Calculate one worker's monthly payroll from the records in the request body
    """
    serializer = StaffCalculationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        context = build_calculation_context(
            data["year"], data["month"], data["holidays"], data, payroll_rules_from_settings()
        )
        result = PayrollService().calculate(context)
    except PayrollConfigurationError as e:
        raise PayrollConfigurationAPIError(e.safe_message, e.field_name)

    return Response(result.to_dict(), status=status.HTTP_200_OK)


@api_view(["POST"])
@authentication_classes([])
@permission_classes([AllowAny])
def calculate_staff_payroll_bulk(request):
    """
    Calculate monthly payroll for several workers.

    A worker whose configuration is unusable is reported under ``errors``;
    the other workers are still calculated.
    """
    serializer = BulkStaffCalculationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    rules = payroll_rules_from_settings()

    contexts = []
    errors = {}
    for payload in data["workers"]:
        worker_id = payload["worker"]["worker_id"]
        try:
            contexts.append(
                build_calculation_context(
                    data["year"], data["month"], data["holidays"], payload, rules
                )
            )
        except PayrollConfigurationError as e:
            errors[worker_id] = str(e)

    bulk = PayrollService().calculate_bulk(contexts)
    errors.update(bulk.errors)

    logger.info(
        "Bulk payroll request processed",
        extra={
            "requested": len(data["workers"]),
            "successful_count": len(bulk.results),
            "failed_count": len(errors),
            "action": "bulk_payroll_request",
        },
    )

    return Response(
        {
            "year": data["year"],
            "month": data["month"],
            "results": {wid: result.to_dict() for wid, result in bulk.results.items()},
            "errors": errors,
        },
        status=status.HTTP_200_OK,
    )


@api_view(["GET"])
@authentication_classes([])
@permission_classes([AllowAny])
def standard_hours(request):
    """
    Default monthly standard-hours ceiling: Monday-Friday days x 8
    """
    serializer = StandardHoursQuerySerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    year = serializer.validated_data["year"]
    month = serializer.validated_data["month"]

    hours = monthly_standard_hours(year, month)
    return Response(
        {
            "year": year,
            "month": month,
            "working_days": int(hours / 8),
            "standard_hours": str(hours),
        }
    )
