"""Dashboard Service - aggregation for admin, restaurant and delivery dashboards.

Also renders the DailySales Excel export.
"""

from datetime import date, timedelta
from io import BytesIO
from typing import Any
from uuid import UUID

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from sqlalchemy.ext.asyncio import AsyncSession

from foodhub.models.restaurant import Restaurant
from foodhub.repositories.analytics_repository import daily_sales_repository
from foodhub.repositories.customer_repository import customer_repository
from foodhub.repositories.order_repository import order_repository
from foodhub.repositories.restaurant_repository import restaurant_repository
from foodhub.schemas.dashboard import (
    AdminOverview,
    DeliveryDashboard,
    GrowthRates,
    RatingSummary,
    RestaurantDashboard,
    RestaurantSummary,
)
from foodhub.services.delivery_service import delivery_service
from foodhub.services.order_service import order_service
from foodhub.services.personnel_service import personnel_service
from foodhub.services.zone_service import zone_service
from foodhub.utils.clock import growth_rate, previous_month_start, start_of_day, start_of_month, utcnow
from foodhub.utils.exceptions import BadRequestError

_SALES_HEADERS: list[str] = [
    "Date",
    "Restaurant",
    "Total Orders",
    "Completed",
    "Cancelled",
    "Revenue",
    "Commission",
    "Delivery Fees",
    "Discounts",
    "Refunds",
    "Net Revenue",
    "Avg Order Value",
    "Cash",
    "Card",
    "Wallet",
    "UPI",
]
_SALES_WIDTHS: list[int] = [12, 28, 12, 11, 11, 12, 12, 13, 11, 11, 12, 15, 11, 11, 11, 11]


class DashboardService:
    """Dashboard aggregation service."""

    async def get_admin_overview(self, db: AsyncSession) -> AdminOverview:
        """Platform overview with month-over-month growth."""
        now = utcnow()
        today_start = start_of_day(now.date())
        month_start = start_of_month(now)
        prev_start = previous_month_start(month_start)

        restaurants: dict[str, int] = await restaurant_repository.get_totals(db)
        sales: dict[str, float] = await daily_sales_repository.get_totals_since(db, month_start.date())

        monthly_orders: int = await order_repository.count_created_between(db, month_start)
        prev_orders: int = await order_repository.count_created_between(db, prev_start, month_start)
        new_restaurants: int = await restaurant_repository.count_created_between(db, month_start)
        prev_restaurants: int = await restaurant_repository.count_created_between(db, prev_start, month_start)
        new_customers: int = await customer_repository.count_created_between(db, month_start)
        prev_customers: int = await customer_repository.count_created_between(db, prev_start, month_start)

        top: list[Restaurant] = await restaurant_repository.top_by_revenue(db, 5)
        return AdminOverview(
            total_restaurants=restaurants["total"],
            active_restaurants=restaurants["active"],
            open_restaurants=restaurants["open"],
            closed_restaurants=restaurants["closed"],
            total_customers=await customer_repository.count(db),
            total_orders=await order_repository.count(db),
            today_orders=await order_repository.count_created_between(db, today_start),
            monthly_orders=monthly_orders,
            monthly_revenue=sales["revenue"],
            monthly_commission=sales["commission"],
            top_restaurants=[
                RestaurantSummary(
                    id=str(r.id),
                    name=r.name,
                    total_orders=r.total_orders or 0,
                    total_revenue=r.total_revenue or 0.0,
                    rating_average=r.rating_average or 0.0,
                )
                for r in top
            ],
            recent_orders=await order_service.get_recent(db, 10),
            growth=GrowthRates(
                restaurants=growth_rate(new_restaurants, prev_restaurants),
                customers=growth_rate(new_customers, prev_customers),
                orders=growth_rate(monthly_orders, prev_orders),
            ),
        )

    async def get_restaurant_dashboard(self, db: AsyncSession, restaurant: Restaurant) -> RestaurantDashboard:
        today_start = start_of_day(utcnow().date())
        summary: dict[str, Any] = await order_repository.get_day_summary(
            db, restaurant.id, today_start, today_start + timedelta(days=1)
        )
        completed: int = summary["completed"]
        return RestaurantDashboard(
            restaurant_id=str(restaurant.id),
            restaurant_name=restaurant.name,
            today_orders=summary["total"],
            today_revenue=round(summary["revenue"], 2),
            completed_orders=completed,
            pending_orders=summary["pending"],
            average_order_value=round(summary["revenue"] / completed, 2) if completed else 0.0,
            recent_orders=await order_service.get_recent(db, 10, restaurant.id),
            rating=RatingSummary(
                average=round(restaurant.rating_average or 0.0, 1),
                count=restaurant.rating_count or 0,
            ),
        )

    async def get_delivery_dashboard(self, db: AsyncSession) -> DeliveryDashboard:
        return DeliveryDashboard(
            tracking=await delivery_service.get_tracking_stats(db),
            personnel=await personnel_service.get_stats(db),
            zones=await zone_service.get_stats(db),
        )

    async def export_sales_excel(
        self,
        db: AsyncSession,
        date_from: date | None = None,
        date_to: date | None = None,
        restaurant_id: UUID | None = None,
    ) -> bytes:
        """Render DailySales rows for a date range as an .xlsx workbook.

        Args:
            db: Async database session
            date_from: First day (default 30 days ago)
            date_to: Last day (default today)
            restaurant_id: Optional single-restaurant filter

        Returns:
            bytes: Workbook content
        """
        if date_to is None:
            date_to = utcnow().date()
        if date_from is None:
            date_from = date_to - timedelta(days=30)
        if date_to < date_from:
            raise BadRequestError("End date must not be before start date")

        rows = await daily_sales_repository.get_range(db, date_from, date_to, restaurant_id)
        names: dict[UUID, str] = {
            r.id: r.name for r in await restaurant_repository.get_by_ids(db, list({s.restaurant_id for s in rows}))
        }

        wb = Workbook()
        ws = wb.active
        ws.title = "Daily Sales"
        header_font = Font(bold=True, color="FFFFFF", size=11)
        header_fill = PatternFill(start_color="2D3436", end_color="2D3436", fill_type="solid")
        for col_idx, header in enumerate(_SALES_HEADERS, 1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")

        for sales in rows:
            methods: dict[str, Any] = sales.payment_methods or {}
            ws.append([
                str(sales.date),
                names.get(sales.restaurant_id, str(sales.restaurant_id)),
                sales.total_orders,
                sales.completed_orders,
                sales.cancelled_orders,
                sales.total_revenue,
                sales.commission,
                sales.delivery_fees,
                sales.discounts,
                sales.refunds,
                sales.net_revenue,
                sales.average_order_value,
                *[methods.get(method, {}).get("amount", 0) for method in ("cash", "card", "wallet", "upi")],
            ])

        for i, width in enumerate(_SALES_WIDTHS, 1):
            ws.column_dimensions[ws.cell(row=1, column=i).column_letter].width = width

        buffer = BytesIO()
        wb.save(buffer)
        return buffer.getvalue()


# Singleton instance
dashboard_service: DashboardService = DashboardService()
