"""
SQLAlchemy-backed store for trips and their activities.

Activities reference trips by the text form of the trip id, so every
trip/activity join goes through CAST(trips.id AS VARCHAR).
"""
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional
from sqlalchemy import String, cast
from sqlalchemy.orm import Session
from app.core.identifiers import TripId, TripIdPolicy
from app.models.activity import Activity
from app.models.trip import Trip


class TripStore:
    """Persistence operations the itinerary engine depends on."""

    def __init__(self, db: Session, id_policy: TripIdPolicy):
        self.db = db
        self.id_policy = id_policy

    def trip_query(self, trip_id: TripId, owner_id: int, for_update: bool = False):
        query = self.db.query(Trip).filter(Trip.id == trip_id, Trip.user_id == owner_id)
        if for_update:
            query = query.with_for_update()
        return query

    def get_trip(self, trip_id: TripId, owner_id: int, for_update: bool = False) -> Optional[Trip]:
        """Trip owned by owner_id, optionally row-locked until the transaction ends."""
        return self.trip_query(trip_id, owner_id, for_update=for_update).first()

    def list_trips(self, owner_id: int) -> List[Trip]:
        return self.db.query(Trip).filter(
            Trip.user_id == owner_id
        ).order_by(Trip.start_date.asc()).all()

    def list_activities(self, trip_id: TripId) -> List[Activity]:
        """Activities of one trip, earliest first."""
        return self.db.query(Activity).filter(
            Activity.trip_id == self.id_policy.activity_ref(trip_id)
        ).order_by(Activity.start_time.asc()).all()

    def list_activities_for_owner(self, owner_id: int) -> Dict[str, List[Activity]]:
        """All activities of the owner's trips, grouped by trip reference."""
        rows = self.db.query(Activity).join(
            Trip, Activity.trip_id == cast(Trip.id, String)
        ).filter(
            Trip.user_id == owner_id
        ).order_by(Activity.start_time.asc()).all()

        grouped: Dict[str, List[Activity]] = defaultdict(list)
        for activity in rows:
            grouped[activity.trip_id].append(activity)
        return dict(grouped)

    def activity_costs(self, trip_id: TripId) -> list:
        """Raw stored costs of a trip's activities."""
        rows = self.db.query(Activity.cost).filter(
            Activity.trip_id == self.id_policy.activity_ref(trip_id)
        ).all()
        return [row[0] for row in rows]

    def insert_activity(
        self,
        trip_id: TripId,
        title: str,
        location: str,
        start_time: datetime,
        cost: Decimal,
    ) -> Activity:
        activity = Activity(
            trip_id=self.id_policy.activity_ref(trip_id),
            title=title,
            location=location,
            start_time=start_time,
            cost=cost,
        )
        self.db.add(activity)
        self.db.flush()
        return activity

    def create_trip(
        self,
        owner_id: int,
        title: str,
        destination: str,
        start_date: date,
        end_date: date,
        budget: Decimal,
        companions: int,
        status: str,
        image: Optional[str],
        itinerary: list,
    ) -> Trip:
        trip = Trip(
            user_id=owner_id,
            title=title,
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            budget=budget,
            companions=companions,
            status=status,
            image=image,
            itinerary=itinerary,
        )
        new_id = self.id_policy.new_id()
        if new_id is not None:
            trip.id = new_id
        self.db.add(trip)
        self.db.flush()
        return trip

    def update_trip(self, trip: Trip, **fields) -> Trip:
        for name, value in fields.items():
            setattr(trip, name, value)
        self.db.flush()
        return trip

    def delete_trip(self, trip: Trip) -> None:
        """Delete a trip and the activities that reference it."""
        self.db.query(Activity).filter(
            Activity.trip_id == self.id_policy.activity_ref(trip.id)
        ).delete(synchronize_session=False)
        self.db.delete(trip)
        self.db.flush()

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
