"""Service bookings against providers."""
import logging
from datetime import datetime
from typing import List

from opentelemetry import trace

from marketplace.errors import ValidationError
from marketplace.monitoring import bookings_created_counter
from marketplace.schemas import Booking, BookingStatus
from marketplace.storage import EntityKind, Storage

logger = logging.getLogger(__name__)


class BookingService:
    """Creates and lists bookings; independent of carts and orders."""

    def __init__(self, storage: Storage):
        self.storage = storage
        self.tracer = trace.get_tracer(__name__)

    def create_booking(
        self,
        user_id: str,
        provider_id: str,
        service_description: str,
        scheduled_date: datetime,
        total_cost: int
    ) -> Booking:
        """
        Book a provider.

        The provider id is stored as given; it is not checked against the
        provider collection.

        Args:
            user_id: User identifier
            provider_id: Provider identifier
            service_description: What the user wants done
            scheduled_date: When the service should happen
            total_cost: Agreed cost

        Returns:
            The pending booking

        Raises:
            ValidationError: If a required field is missing or malformed
        """
        errors = []
        if not provider_id:
            errors.append({"field": "providerId", "message": "Provider id is required"})
        if not service_description or not service_description.strip():
            errors.append({"field": "serviceDescription", "message": "Service description is required"})
        if not isinstance(scheduled_date, datetime):
            errors.append({"field": "scheduledDate", "message": "Scheduled date must be a datetime"})
        if not isinstance(total_cost, int) or isinstance(total_cost, bool) or total_cost < 0:
            errors.append({"field": "totalCost", "message": "Total cost must be a non-negative integer"})
        if errors:
            raise ValidationError("Invalid booking data", errors)

        with self.tracer.start_as_current_span("store.create") as db_span:
            db_span.set_attribute("store.kind", EntityKind.BOOKINGS.value)
            db_span.set_attribute("provider.id", provider_id)
            booking = self.storage.create(EntityKind.BOOKINGS, {
                "user_id": user_id,
                "provider_id": provider_id,
                "service_description": service_description,
                "scheduled_date": scheduled_date,
                "total_cost": total_cost,
                "status": BookingStatus.PENDING,
            })
            db_span.set_attribute("booking.id", booking.id)

        bookings_created_counter.add(1)
        logger.info("Booking created", extra={
            "user_id": user_id,
            "provider_id": provider_id,
            "booking_id": booking.id,
            "scheduled_date": scheduled_date.isoformat()
        })
        return booking

    def list_bookings(self, user_id: str) -> List[Booking]:
        return self.storage.filter(EntityKind.BOOKINGS, user_id=user_id)
