import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from users.permissions import IsManagerOrHigher

from .serializers import ReportParameterSerializer
from .services import SummaryReportService

logger = logging.getLogger(__name__)


class ReportViewSet(viewsets.ViewSet):
    """Manager reports; each takes ?start_date=YYYY-MM-DD&end_date=YYYY-MM-DD"""

    permission_classes = [IsManagerOrHigher]

    def _date_range(self, request):
        serializer = ReportParameterSerializer(data=request.query_params)
        if not serializer.is_valid():
            return None, Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        return serializer.validated_data, None

    @action(detail=False, methods=["get"], url_path="summary")
    def summary(self, request):
        params, error = self._date_range(request)
        if error:
            return error

        report_data = SummaryReportService.generate_summary_report(
            start_date=params["start_date"], end_date=params["end_date"]
        )
        return Response(report_data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path="staff")
    def staff(self, request):
        params, error = self._date_range(request)
        if error:
            return error

        rows = SummaryReportService.generate_staff_report(
            start_date=params["start_date"], end_date=params["end_date"]
        )
        return Response(
            {
                "start_date": params["start_date"].isoformat(),
                "end_date": params["end_date"].isoformat(),
                "staff": rows,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=["get"], url_path="menu")
    def menu(self, request):
        params, error = self._date_range(request)
        if error:
            return error

        report_data = SummaryReportService.generate_menu_report(
            start_date=params["start_date"], end_date=params["end_date"]
        )
        return Response(report_data, status=status.HTTP_200_OK)
