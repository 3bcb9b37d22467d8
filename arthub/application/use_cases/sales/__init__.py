"""Sales reporting use cases."""

from arthub.application.use_cases.sales.reporting import SalesReportingUseCase

__all__ = ["SalesReportingUseCase"]
